class SelectTreeException(Exception):
    """Base Flask-SelectTree exception"""

    pass


class InvalidRelationshipError(SelectTreeException):
    """
    Raised at setup time when the configured relationship does not exist
    or is neither MANYTOMANY nor MANYTOONE
    """

    pass


class TreeBuildError(SelectTreeException):
    """Raised when a flat record set can't be assembled into a tree"""

    pass


class TreeCycleError(TreeBuildError):
    """
    Raised when the same record identity is reached twice while
    descending the tree, either through a parent cycle or
    through duplicated identities.
    """

    def __init__(self, node_id):
        self.node_id = node_id
        super(TreeCycleError, self).__init__(
            "Record {!r} reached twice while building the tree".format(node_id)
        )
