"""Flight category classification from visibility and ceiling."""

from typing import Optional

from flightwx.weather.models import FlightCategory, WeatherFields


class FlightCategoryClassifier:
    """
    FAA/NWS flight category rules.

    All methods are static: pure functions with no state.
    """

    @staticmethod
    def visibility_category(visibility_sm: float) -> FlightCategory:
        """
        Category from visibility alone.

        LIFR < 1 SM, IFR 1 to < 3 SM, MVFR 3 to < 5 SM, VFR >= 5 SM or unbounded.
        """
        if visibility_sm < 1:
            return FlightCategory.LIFR
        if visibility_sm < 3:
            return FlightCategory.IFR
        if visibility_sm < 5:
            return FlightCategory.MVFR
        return FlightCategory.VFR

    @staticmethod
    def ceiling_category(ceiling_ft: float) -> FlightCategory:
        """
        Category from ceiling alone.

        LIFR < 500 ft, IFR 500 to < 1000 ft, MVFR 1000 to < 3000 ft,
        VFR >= 3000 ft or unlimited.
        """
        if ceiling_ft < 500:
            return FlightCategory.LIFR
        if ceiling_ft < 1000:
            return FlightCategory.IFR
        if ceiling_ft < 3000:
            return FlightCategory.MVFR
        return FlightCategory.VFR

    @staticmethod
    def classify(
        visibility_sm: Optional[float] = None,
        ceiling_ft: Optional[float] = None,
        clear_sky: bool = False,
        explicit: Optional[str] = None,
    ) -> FlightCategory:
        """
        Determine flight category.

        An explicit category (one of the five known values) is trusted as is.
        Otherwise the worse of the visibility and ceiling categories wins; a
        single known value is used alone. With neither, clear or
        unrestricted-cloud conditions give VFR and anything else UNKNOWN.

        Args:
            visibility_sm: Visibility in statute miles (inf = unbounded)
            ceiling_ft: Ceiling in feet AGL (inf = unlimited)
            clear_sky: Text signals clear or unrestricted cloud conditions
            explicit: Category token or upstream category field

        Returns:
            FlightCategory, never None
        """
        if explicit is not None:
            validated = FlightCategory.from_token(explicit)
            if validated is not None:
                return validated

        vis_cat = None
        if visibility_sm is not None:
            vis_cat = FlightCategoryClassifier.visibility_category(visibility_sm)

        ceil_cat = None
        if ceiling_ft is not None:
            ceil_cat = FlightCategoryClassifier.ceiling_category(ceiling_ft)

        if vis_cat is not None and ceil_cat is not None:
            return min(vis_cat, ceil_cat)
        if vis_cat is not None:
            return vis_cat
        if ceil_cat is not None:
            return ceil_cat

        if clear_sky:
            return FlightCategory.VFR
        return FlightCategory.UNKNOWN

    @staticmethod
    def classify_fields(fields: WeatherFields) -> FlightCategory:
        """Classify an extracted field record."""
        return FlightCategoryClassifier.classify(
            visibility_sm=fields.visibility_sm,
            ceiling_ft=fields.ceiling_ft,
            clear_sky=fields.clear_sky or fields.unrestricted_clouds,
            explicit=fields.category_token.value if fields.category_token else None,
        )
