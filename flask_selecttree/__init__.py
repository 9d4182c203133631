__version__ = "0.1.0"

from .exceptions import (  # noqa: F401
    InvalidRelationshipError,
    SelectTreeException,
    TreeBuildError,
    TreeCycleError,
)
from .fields import SelectTreeField  # noqa: F401
from .fieldwidgets import SelectTreeWidget  # noqa: F401
from .models.sqla.interface import SQLATreeInterface  # noqa: F401
from .tree import (  # noqa: F401
    build_tree,
    build_tree_from_queries,
    group_by,
    Node,
    Record,
    TreeConfig,
)
