from config.schema import (
    AppConfig,
    DataSourceConfig,
    PeriodDefinition,
    TimeGridConfig,
)


def default_time_grid() -> TimeGridConfig:
    """Standard-Tagesraster der Schule (Montag bis Freitag).

    Stundenraster:
    Period 1   07:30 - 08:25
    Period 2   08:25 - 09:20
    Period 3   09:20 - 10:15
    Period 4   10:15 - 10:30   (Pause)
    Period 5   10:30 - 11:25
    Period 6   11:25 - 12:20
    Lunch      12:20 - 12:50   (Mittagspause)
    Period 7   12:50 - 13:45
    Period 8   13:45 - 14:40
    Period 9   14:40 - 15:25
    Period 10  15:35 - 15:45   (Pause)
    Period 11  15:45 - 16:45
    Period 12  16:45 - 17:30

    Pausen tragen den Namen einer regulären Stunde ("Period 4", "Period 10"),
    werden aber nie belegt.
    """
    return TimeGridConfig(
        day_names=["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
        periods=[
            PeriodDefinition(name="Period 1", start_time="07:30", end_time="08:25"),
            PeriodDefinition(name="Period 2", start_time="08:25", end_time="09:20"),
            PeriodDefinition(name="Period 3", start_time="09:20", end_time="10:15"),
            PeriodDefinition(name="Period 4", start_time="10:15", end_time="10:30",
                             is_break=True),
            PeriodDefinition(name="Period 5", start_time="10:30", end_time="11:25"),
            PeriodDefinition(name="Period 6", start_time="11:25", end_time="12:20"),
            PeriodDefinition(name="Lunch", start_time="12:20", end_time="12:50",
                             is_break=True),
            PeriodDefinition(name="Period 7", start_time="12:50", end_time="13:45"),
            PeriodDefinition(name="Period 8", start_time="13:45", end_time="14:40"),
            PeriodDefinition(name="Period 9", start_time="14:40", end_time="15:25"),
            PeriodDefinition(name="Period 10", start_time="15:35", end_time="15:45",
                             is_break=True),
            PeriodDefinition(name="Period 11", start_time="15:45", end_time="16:45"),
            PeriodDefinition(name="Period 12", start_time="16:45", end_time="17:30"),
        ],
    )


def default_app_config() -> AppConfig:
    """Vollständige Default-Konfiguration mit Demo-Datenquelle."""
    return AppConfig(
        school_name="Demo Secondary School",
        time_grid=default_time_grid(),
        data_source=DataSourceConfig(),
    )
