"""Direct-booking form for the site's POST redirect endpoint."""

from pydantic import BaseModel

from cinevo.config import settings
from cinevo.schemas.movie import Showtime


class BookingForm(BaseModel):
    """Everything a client needs to submit the booking redirect form."""

    action: str
    method: str = "POST"
    target: str = "_blank"
    fields: dict[str, str]


def booking_form(showtime: Showtime) -> BookingForm | None:
    """
    Build the booking redirect form for a showtime.

    Returns None when the showtime id or movie slug was not captured; the
    plain booking URL should be used instead.
    """
    if not showtime.showtime_id or not showtime.movie_slug:
        return None

    goto_url = f"{settings.site_base_url}{settings.booking_goto_path}"
    return BookingForm(
        action=f"{goto_url}/{showtime.cinema.slug}/{showtime.showtime_id}",
        fields={
            "showtimeId": showtime.showtime_id,
            "cinemaslug": showtime.cinema.slug,
            "movieslug": showtime.movie_slug,
        },
    )
