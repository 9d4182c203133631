import logging

from sqlalchemy import and_, inspect, not_, or_
from sqlalchemy.orm.interfaces import MANYTOMANY, MANYTOONE

from ...const import (
    LOGMSG_DEB_TREE_QUERIES,
    LOGMSG_ERR_REL_KIND,
    LOGMSG_ERR_REL_NOT_FOUND,
    LOGMSG_WAR_PK_NO_PYTHON_TYPE,
    LOGMSG_WAR_SAVE_UNKNOWN_IDS,
)
from ...exceptions import InvalidRelationshipError
from ...tree import Record

log = logging.getLogger(__name__)


class SQLATreeInterface(object):
    """
    Data source and selection store for a select tree, bound to one
    relationship of a SQLAlchemy model::

        class Product(Model):
            id = Column(Integer, primary_key=True)
            categories = relationship("Category", secondary=assoc_product_category)

        datamodel = SQLATreeInterface(Product, "categories", db.session)

    The related model must reference itself through a parent column,
    MANYTOMANY relationships select many ids, MANYTOONE select one.
    """

    def __init__(self, obj, relationship_name, session):
        self.obj = obj
        self.relationship_name = relationship_name
        self.session = session
        relationships = inspect(obj).relationships
        if relationship_name not in relationships:
            log.error(LOGMSG_ERR_REL_NOT_FOUND, relationship_name, obj.__name__)
            raise InvalidRelationshipError(
                "Relationship {} not found on model {}".format(
                    relationship_name, obj.__name__
                )
            )
        self.relationship = relationships[relationship_name]
        if self.relationship.direction not in (MANYTOMANY, MANYTOONE):
            log.error(
                LOGMSG_ERR_REL_KIND,
                relationship_name,
                obj.__name__,
                self.relationship.direction.name,
            )
            raise InvalidRelationshipError(
                "Relationship {} on model {} is {}, expected MANYTOMANY or "
                "MANYTOONE".format(
                    relationship_name, obj.__name__, self.relationship.direction.name
                )
            )
        mapper = self.relationship.mapper
        self.related_model = mapper.class_
        pk_column = mapper.primary_key[0]
        self.related_pk_name = mapper.get_property_by_column(pk_column).key
        self._pk_python_type = self._get_python_type(pk_column)

    def __repr__(self):
        return "<{}({}.{})>".format(
            self.__class__.__name__, self.obj.__name__, self.relationship_name
        )

    @property
    def is_multiple(self):
        return self.relationship.direction == MANYTOMANY

    def _get_python_type(self, column):
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            python_type = object
        # SQLAlchemy >= 2.1 returns object instead of raising
        if python_type is object:
            log.warning(LOGMSG_WAR_PK_NO_PYTHON_TYPE, self.related_model.__name__)
            return str
        return python_type

    @property
    def related_pk_python_type(self):
        return self._pk_python_type

    def coerce_id(self, _id):
        """Converts an id to the related primary key python type"""
        if isinstance(_id, self._pk_python_type):
            return _id
        return self._pk_python_type(_id)

    def get_related_pk(self, item):
        return getattr(item, self.related_pk_name)

    def _get_parent_column(self, parent_attribute):
        return getattr(self.related_model, parent_attribute)

    @staticmethod
    def _is_parent(column, value):
        if value is None:
            return column.is_(None)
        return column == value

    def get_root_query(
        self, parent_attribute, parent_null_value=None, modify_query=None, root_aliases=()
    ):
        """
        Query for root candidates, rows whose parent is the sentinel
        or one of ``root_aliases``. ``modify_query`` receives and
        returns the query, it's applied to this query only.
        """
        column = self._get_parent_column(parent_attribute)
        criteria = [
            self._is_parent(column, value)
            for value in (parent_null_value,) + tuple(root_aliases)
        ]
        query = self.session.query(self.related_model).filter(or_(*criteria))
        if modify_query:
            query = modify_query(query)
        return query

    def get_non_root_query(self, parent_attribute, parent_null_value=None, root_aliases=()):
        """Query for every other row, never modified"""
        column = self._get_parent_column(parent_attribute)
        criteria = [
            not_(self._is_parent(column, value))
            for value in (parent_null_value,) + tuple(root_aliases)
        ]
        return self.session.query(self.related_model).filter(and_(*criteria))

    def get_records(
        self,
        title_attribute,
        parent_attribute,
        parent_null_value=None,
        modify_query=None,
        root_aliases=(),
    ):
        """
        Fetches both record sets.

        :return: Tuple of (root records, other records), lists of
            :class:`flask_selecttree.tree.Record`
        """
        root_rows = self.get_root_query(
            parent_attribute, parent_null_value, modify_query, root_aliases
        ).all()
        other_rows = self.get_non_root_query(
            parent_attribute, parent_null_value, root_aliases
        ).all()
        log.debug(LOGMSG_DEB_TREE_QUERIES, len(root_rows), len(other_rows), self)
        return (
            [self._to_record(row, title_attribute, parent_attribute) for row in root_rows],
            [self._to_record(row, title_attribute, parent_attribute) for row in other_rows],
        )

    def _to_record(self, row, title_attribute, parent_attribute):
        return Record(
            id=self.get_related_pk(row),
            label=getattr(row, title_attribute),
            parent=getattr(row, parent_attribute),
        )

    def _to_id(self, item):
        if isinstance(item, self.related_model):
            return self.get_related_pk(item)
        return item

    def load_selection(self, value):
        """
        Selected ids from a relationship value, the collection of
        related rows for MANYTOMANY or the related row for MANYTOONE.
        Plain ids, field defaults for example, pass through.
        """
        if self.is_multiple:
            return [self._to_id(item) for item in value or []]
        if value is None:
            return None
        return self._to_id(value)

    def get_related_by_ids(self, ids):
        if not ids:
            return []
        pk = getattr(self.related_model, self.related_pk_name)
        return self.session.query(self.related_model).filter(pk.in_(ids)).all()

    def save_selection(self, item, ids):
        """
        Replaces the relationship on ``item`` with exactly ``ids``.
        A missing selection deselects everything. Ids are coerced to
        the related primary key python type first.
        """
        if self.is_multiple:
            ids = [self.coerce_id(_id) for _id in ids or []]
            related = self.get_related_by_ids(ids)
            found = set(self.get_related_pk(row) for row in related)
            unknown = [_id for _id in ids if _id not in found]
            if unknown:
                log.warning(LOGMSG_WAR_SAVE_UNKNOWN_IDS, self.related_model.__name__, item, unknown)
            order = {_id: index for index, _id in enumerate(ids)}
            related.sort(key=lambda row: order[self.get_related_pk(row)])
            setattr(item, self.relationship_name, related)
        else:
            if ids is not None:
                ids = self.coerce_id(ids)
            related = self.session.get(self.related_model, ids) if ids is not None else None
            if ids is not None and related is None:
                log.warning(LOGMSG_WAR_SAVE_UNKNOWN_IDS, self.related_model.__name__, item, [ids])
            setattr(item, self.relationship_name, related)
