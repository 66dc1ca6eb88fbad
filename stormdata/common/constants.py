"""Application constants."""

USER_AGENT = "stormdata-eda/1.0 (+research)"
STAGES = (
    "fetch",
    "normalise",
    "report",
)
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
SUMMARY_MARKER = "Summary"
SOURCE_COLUMNS = (
    "BGN_DATE",
    "STATE",
    "EVTYPE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
)
DAMAGE_UNIT_MULTIPLIERS = {
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
}
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "unmatched_rate",
    "path",
    "error_code",
    "message",
)
