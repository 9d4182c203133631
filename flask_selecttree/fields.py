import logging

from flask import current_app, has_app_context
from wtforms import Field, ValidationError

from .const import (
    CONFIG_DEFAULT_OPEN_LEVEL,
    CONFIG_DIRECTION,
    CONFIG_EMPTY_LABEL,
    CONFIG_RTL,
    DEFAULT_DIRECTION,
    DEFAULT_EMPTY_LABEL,
    DEFAULT_OPEN_LEVEL,
    DEFAULT_PLACEHOLDER,
    DEFAULT_RTL,
    DIRECTIONS,
)
from .fieldwidgets import SelectTreeWidget
from .tree import TreeConfig, build_tree_from_queries

log = logging.getLogger(__name__)


def _evaluate(value):
    """Options may be given as zero argument callables"""
    if callable(value):
        return value()
    return value


def _get_config(key, default):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def _iter_values(nodes):
    stack = list(nodes)
    while stack:
        node = stack.pop()
        yield node["value"]
        stack.extend(node.get("children", ()))


class SelectTreeField(Field):
    """
    Hierarchical select backed by a self referencing model::

        class ProductForm(DynamicForm):
            categories = SelectTreeField(
                "Categories",
                datamodel=SQLATreeInterface(Product, "categories", db.session),
                title_attribute="name",
                parent_attribute="parent_id",
                modify_query=lambda query: query.filter(Category.active.is_(True)),
                disabled_options=[3, 4],
            )

    Multiple or single selection follows the relationship kind,
    MANYTOMANY or MANYTOONE. The tree is rebuilt on every call
    to :meth:`get_tree`.

    :param datamodel: A :class:`SQLATreeInterface`
    :param title_attribute: Related model attribute used as node name
    :param parent_attribute: Related model attribute holding the parent id
    :param modify_query: Callable receiving and returning the root query,
        descendants are always fetched in full
    :param parent_null_value: Parent value that marks a root
    :param root_aliases: Other parent values treated as roots
    :param disabled_options: Ids of disabled nodes, or a callable
        returning them
    :param coerce: Converts submitted values, defaults to the related
        primary key python type
    """

    widget = SelectTreeWidget()

    def __init__(
        self,
        label=None,
        validators=None,
        datamodel=None,
        title_attribute="name",
        parent_attribute="parent_id",
        modify_query=None,
        parent_null_value=None,
        root_aliases=(),
        disabled_options=(),
        with_count=False,
        always_open=False,
        empty_label=None,
        independent=True,
        clearable=True,
        expand_selected=True,
        enable_branch_node=False,
        grouped=True,
        default_open_level=None,
        direction=None,
        searchable=False,
        placeholder=None,
        rtl=None,
        disabled=False,
        coerce=None,
        **kwargs
    ):
        super(SelectTreeField, self).__init__(label, validators, **kwargs)
        if datamodel is None:
            raise TypeError("SelectTreeField requires a datamodel")
        if isinstance(direction, str) and direction not in DIRECTIONS:
            raise ValueError(
                "direction must be one of {}, got {!r}".format(DIRECTIONS, direction)
            )
        self.datamodel = datamodel
        self.title_attribute = title_attribute
        self.parent_attribute = parent_attribute
        self.modify_query = modify_query
        self.parent_null_value = parent_null_value
        self.root_aliases = tuple(root_aliases)
        self.disabled_options = disabled_options
        self.with_count = with_count
        self.always_open = always_open
        self.empty_label = empty_label
        self.independent = independent
        self.clearable = clearable
        self.expand_selected = expand_selected
        self.enable_branch_node = enable_branch_node
        self.grouped = grouped
        self.default_open_level = default_open_level
        self.direction = direction
        self.searchable = searchable
        self.placeholder = placeholder
        self.rtl = rtl
        self.disabled = disabled
        self.coerce = coerce or datamodel.related_pk_python_type

    @property
    def multiple(self):
        return self.datamodel.is_multiple

    def get_disabled_options(self):
        return frozenset(_evaluate(self.disabled_options) or ())

    def get_empty_label(self):
        label = _evaluate(self.empty_label)
        if not label:
            label = _get_config(CONFIG_EMPTY_LABEL, DEFAULT_EMPTY_LABEL)
        return str(label)

    def get_placeholder(self):
        return str(_evaluate(self.placeholder) or DEFAULT_PLACEHOLDER)

    def get_default_open_level(self):
        level = _evaluate(self.default_open_level)
        if level is None:
            level = _get_config(CONFIG_DEFAULT_OPEN_LEVEL, DEFAULT_OPEN_LEVEL)
        return int(level)

    def get_direction(self):
        direction = _evaluate(self.direction)
        if direction is None:
            direction = _get_config(CONFIG_DIRECTION, DEFAULT_DIRECTION)
        return direction

    def get_rtl(self):
        rtl = _evaluate(self.rtl)
        if rtl is None:
            rtl = _get_config(CONFIG_RTL, DEFAULT_RTL)
        return bool(rtl)

    def get_tree_config(self):
        return TreeConfig(
            parent_null_value=self.parent_null_value,
            root_aliases=self.root_aliases,
            disabled_ids=self.get_disabled_options(),
        )

    def get_tree(self):
        """The node tree as a list of dicts, ready for the widget"""
        root_records, other_records = self.datamodel.get_records(
            self.title_attribute,
            self.parent_attribute,
            parent_null_value=self.parent_null_value,
            modify_query=self.modify_query,
            root_aliases=self.root_aliases,
        )
        nodes = build_tree_from_queries(
            root_records, other_records, self.get_tree_config()
        )
        return [node.to_dict() for node in nodes]

    def get_selected_ids(self):
        if self.multiple:
            return list(self.data or [])
        return [] if self.data is None else [self.data]

    def get_widget_options(self):
        multiple = self.multiple
        return {
            "name": self.name,
            "state": self.data,
            "options": self.get_tree(),
            "searchable": self.searchable,
            "showCount": self.with_count,
            "placeholder": self.get_placeholder(),
            "disabledBranchNode": not self.enable_branch_node,
            "disabled": self.disabled,
            "isSingleSelect": not multiple,
            "isIndependentNodes": self.independent,
            "showTags": multiple,
            "alwaysOpen": self.always_open,
            "clearable": self.clearable,
            "emptyText": self.get_empty_label(),
            "expandSelected": self.expand_selected,
            "grouped": self.grouped,
            "openLevel": self.get_default_open_level(),
            "direction": self.get_direction(),
            "rtl": self.get_rtl(),
        }

    def process_data(self, value):
        self.data = self.datamodel.load_selection(value)

    def process_formdata(self, valuelist):
        values = [value for value in valuelist if value not in (None, "")]
        try:
            values = [self.coerce(value) for value in values]
        except (ValueError, TypeError):
            raise ValueError(
                self.gettext(
                    "Invalid choice(s): one or more data inputs could not be coerced."
                )
            )
        if self.multiple:
            self.data = values
        else:
            self.data = values[0] if values else None

    def pre_validate(self, form):
        selected = self.get_selected_ids()
        if not selected:
            return
        values = set(_iter_values(self.get_tree()))
        invalid = [str(value) for value in selected if value not in values]
        if not invalid:
            return
        if self.multiple:
            raise ValidationError(
                self.ngettext(
                    "'%(value)s' is not a valid choice for this field.",
                    "'%(value)s' are not valid choices for this field.",
                    len(invalid),
                )
                % dict(value="', '".join(invalid))
            )
        raise ValidationError(self.gettext("Not a valid choice."))

    def populate_obj(self, obj, name):
        self.datamodel.save_selection(obj, self.data)
