"""Global configuration: versions, defaults, collection names."""

# Shape version of the persisted action-log envelope
SCHEMA_VERSION = 1

# Version of the rule set that produced a batch of actions
PARSER_VERSION = "1.0.0"

# Unit used when a command names a quantity without one
DEFAULT_UNIT = "EA"

# Region stamped on new projects when none is given
DEFAULT_REGION = "Rhode Island"

# Project type assumed when neither context nor text names one
DEFAULT_PROJECT_TYPE = "basement_finish"

# Remote price lookups accept at most this many descriptions per request
PRICING_BATCH_SIZE = 10

# Record store collections
PROJECTS = "projects"
TAKEOFF_ITEMS = "takeoff_items"
RFIS = "rfis"
LABOR_ESTIMATES = "labor_estimates"
LABOR_LINE_ITEMS = "labor_line_items"
PLAN_FILES = "plan_files"
CHECKLIST_ITEMS = "checklist_items"
ASSUMPTIONS = "assumptions"

# Fields of a project that `project.set_defaults` may change
PROJECT_DEFAULT_FIELDS = (
    "tax_percent",
    "markup_percent",
    "labor_burden_percent",
    "waste_percent",
)
