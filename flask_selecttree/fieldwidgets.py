import json

from markupsafe import Markup
from wtforms.widgets import html_params


class SelectTreeWidget:
    """
    Select tree widget. Renders a container carrying the tree and its
    display flags as JSON on ``data-tree-config``, picked up client side
    by the tree select script, and one hidden input per selected id so
    the current selection is submitted as is.

    """

    data_template = "<div %(container)s>%(inputs)s</div>"

    def __init__(self, extra_classes=None, style=None):
        self.extra_classes = extra_classes
        self.style = style

    def __call__(self, field, **kwargs):
        kwargs.setdefault("id", field.id)
        classes = ["select-tree form-control"]
        if self.extra_classes:
            classes.append(self.extra_classes)
        for key in ("class", "class_"):
            render_class = kwargs.pop(key, "")
            if render_class:
                classes.append(render_class)
        kwargs["class"] = " ".join(classes)
        if self.style:
            kwargs["style"] = self.style
        options = field.get_widget_options()
        kwargs["data-tree-config"] = json.dumps(options, default=str)
        if options["isSingleSelect"]:
            kwargs["data-mode"] = "single"
        else:
            kwargs["data-mode"] = "multiple"
        inputs = "".join(
            "<input %s>" % html_params(type="hidden", name=field.name, value=value)
            for value in field.get_selected_ids()
        )
        return Markup(
            self.data_template % {"container": html_params(**kwargs), "inputs": inputs}
        )
