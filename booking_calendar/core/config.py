import os
from dotenv import load_dotenv
from pydantic import BaseModel

# Загрузка переменных из .env
load_dotenv()


class Settings(BaseModel):
    # Calendar grid
    week_start_day: str = "sunday"

    # Max stay fallbacks when no season covers the check-in date
    tahoe_max_nights: int = 4
    clear_lake_max_nights: int = 30

    # Clear Lake shared (per-person) capacity
    day_booking_capacity: int = 12

    # Availability snapshot window around the visible month
    availability_buffer_days: int = 30
    default_booking_horizon_days: int = 365

    # Logging settings
    log_format: str = "console"  # Options: "console", "json"

    def max_nights_defaults(self) -> dict[str, int]:
        return {
            "tahoe": self.tahoe_max_nights,
            "clear_lake": self.clear_lake_max_nights,
        }


settings = Settings(
    week_start_day=os.environ.get("WEEK_START_DAY", "sunday").lower(),
    tahoe_max_nights=int(os.environ.get("TAHOE_MAX_NIGHTS", "4")),
    clear_lake_max_nights=int(os.environ.get("CLEAR_LAKE_MAX_NIGHTS", "30")),
    day_booking_capacity=int(os.environ.get("DAY_BOOKING_CAPACITY", "12")),
    availability_buffer_days=int(os.environ.get("AVAILABILITY_BUFFER_DAYS", "30")),
    default_booking_horizon_days=int(
        os.environ.get("DEFAULT_BOOKING_HORIZON_DAYS", "365")
    ),
    log_format=os.environ.get("LOG_FORMAT", "console"),
)
