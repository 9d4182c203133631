from flask_babel import lazy_gettext

# -----------------------------------
#  Log messages
# -----------------------------------
LOGMSG_DEB_TREE_BUILT = "Select tree built: %s root(s), %s node(s) from %s record(s)"
LOGMSG_DEB_TREE_ORPHANS = "Select tree skipped %s orphaned record(s)"
LOGMSG_DEB_TREE_QUERIES = "Select tree fetched %s root and %s non root record(s) for %s"
LOGMSG_ERR_TREE_CYCLE = "Select tree reached record %r twice, parent relation is cyclic"
LOGMSG_ERR_REL_NOT_FOUND = "Relationship %s not found on model %s"
LOGMSG_ERR_REL_KIND = "Relationship %s on model %s is %s, expected MANYTOMANY or MANYTOONE"
LOGMSG_WAR_SAVE_UNKNOWN_IDS = "Ignoring unknown %s id(s) on save of %s: %s"
LOGMSG_WAR_PK_NO_PYTHON_TYPE = "Primary key of %s has no python type, coercing to str"

# -----------------------------------
#  Flask config keys
# -----------------------------------
CONFIG_EMPTY_LABEL = "SELECT_TREE_EMPTY_LABEL"
CONFIG_DEFAULT_OPEN_LEVEL = "SELECT_TREE_DEFAULT_OPEN_LEVEL"
CONFIG_DIRECTION = "SELECT_TREE_DIRECTION"
CONFIG_RTL = "SELECT_TREE_RTL"

# -----------------------------------
#  Defaults
# -----------------------------------
DEFAULT_EMPTY_LABEL = lazy_gettext("No results found")
DEFAULT_PLACEHOLDER = lazy_gettext("Select Value")
DEFAULT_OPEN_LEVEL = 0
DEFAULT_DIRECTION = "auto"
DEFAULT_RTL = False

DIRECTIONS = ("auto", "top", "bottom")
