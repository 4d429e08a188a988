"""CSS synthesised from wizard settings.

Each knob owns one template; a set knob appends its fragment. Fragments are
independent of each other.
"""

from __future__ import annotations

from string import Template

from skincascade.model.skin import WizardSettings

__all__ = ["wizard_css"]

_MARGIN = Template("""
#workskin {
  margin: auto $value%;
  padding: 0.5em $value% 0;
}
""")

_BASE_EM = Template("""
body {
  font-size: $value%;
}
""")

_FONT = Template("""
body,
.toggled form,
.dynamic form,
.secondary,
.dropdown,
blockquote,
pre,
input,
textarea,
.heading .actions,
.heading .action,
.heading span.actions,
span.unread,
.replied,
span.claimed,
.actions span.defaulted {
  font-family: $value;
}
""")

_BACKGROUND_COLOR = Template("""
body,
.toggled form,
.dynamic form,
.secondary,
.dropdown,
th,
tr:hover,
col.name,
div.dynamic,
fieldset fieldset,
fieldset dl dl,
form blockquote.userstuff,
form.verbose legend,
.verbose form legend,
#modal,
.own,
.draft,
.draft .wrapper,
.unread,
.child,
.unwrangled,
.unreviewed,
.thread .even,
.listbox .index,
#outer {
  background: $value;
}

a.tag:hover,
.listbox .heading a.tag:visited:hover {
  color: $value;
}

tbody tr,
thead td,
#footer,
#modal {
  border-color: $value;
}

.listbox,
fieldset fieldset.listbox {
  box-shadow: 0 0 0 1px $value;
}

.listbox .index {
  box-shadow: inset 1px 1px 3px rgba(0, 0, 0, 0.5);
}
""")

_PARAGRAPH_MARGIN = Template("""
.userstuff p {
  margin-bottom: ${value}em;
}
""")

_FOREGROUND_COLOR = Template("""
body,
.toggled form,
.dynamic form,
.secondary,
.dropdown,
#header .search,
form dd.required,
.post .required .warnings,
dd.required,
.required .autocomplete,
.userstuff h2 {
  color: $value;
}

a,
a:link,
a:visited,
a:hover,
#header a,
#header a:visited,
#header .current,
#header .primary .open a,
#header .primary .dropdown:hover a,
#header .primary .dropdown a:focus,
#header .menu .current,
#header .primary .menu a,
#header .primary .menu .current,
#dashboard a,
a.tag,
.listbox > .heading,
.listbox .heading a:visited,
.filters dt a:hover {
  color: $value;
}

form dt,
form.verbose legend,
.verbose form legend,
.faq .categories h3,
.splash .module h3,
.userstuff h3 {
  border-color: $value;
}

/* boxes with fixed backgrounds keep the default text colour */
.notice:not(.required),
.comment_notice,
ul.notes,
.caution,
.notice a {
  color: #2a2a2a;
}
""")

_HEADERCOLOR = Template("""
#header .primary,
#footer,
.autocomplete .dropdown ul li:hover,
li.selected,
a.tag:hover,
.listbox .heading a.tag:visited:hover,
.splash .favorite li:nth-of-type(odd) a:hover,
.splash .favorite li:nth-of-type(odd) a:focus {
  background-image: none;
  background-color: $value;
}

#header .heading a,
#header .user a:hover,
#header .user a:focus,
#header .user .current,
#dashboard a:hover,
.actions a:hover,
.actions input:hover,
.actions a:focus,
.actions input:focus,
label.action:hover,
.action:hover,
.action:focus,
a.cloud1,
a.cloud2,
a.cloud3,
a.cloud4,
a.cloud5,
a.cloud6,
a.cloud7,
a.cloud8,
a.work,
.blurb h4 a:link,
.splash .module h3,
.splash .browse li a:before {
  color: $value;
}

#dashboard,
#dashboard.own {
  border-color: $value;
}
""")

_ACCENT_COLOR = Template("""
table,
thead td,
#header .actions a:hover,
#header .actions a:focus,
#header .dropdown:hover a,
#header .open a,
#header .menu,
#small_login,
#header .dropdown:hover .current + .menu,
fieldset,
form dl,
fieldset dl dl,
fieldset fieldset fieldset,
fieldset fieldset dl dl,
dd.hideme,
form blockquote.userstuff,
dl.index dd,
.statistics .index li:nth-of-type(even),
.listbox,
fieldset fieldset.listbox,
.item dl.visibility,
.reading h4.viewed,
.comment h4.byline,
.splash .favorite li:nth-of-type(odd) a,
.splash .module div.account,
.search [role="tooltip"] {
  background: $value;
  border-color: $value;
}

li.relationships a {
  background: $value;
}

li.blurb,
fieldset,
form dl,
thead,
tfoot,
tfoot td,
th,
tr:hover,
col.name,
#dashboard ul,
.toggled form,
.dynamic form,
.secondary,
dl.meta,
.bookmark .user,
div.comment,
li.comment,
.comment div.icon,
.splash .news li,
.userstuff blockquote {
  border-color: $value;
}

fieldset,
form dl,
fieldset dl dl,
fieldset fieldset fieldset,
fieldset fieldset dl dl,
form blockquote.userstuff {
  box-shadow: inset 1px 0 5px rgba(0, 0, 0, 0.5);
}

fieldset dl,
fieldset.actions,
fieldset dl fieldset dl,
form.verbose legend,
.verbose form legend {
  box-shadow: none;
}

@media only screen and (max-width: 62em) {
  #dashboard .secondary {
    background: $value;
    box-shadow: none;
  }
}

@media only screen and (max-width: 42em) {
  .javascript {
    background: $value;
  }
}
""")

# Knob name -> template, in the order fragments are appended.
_TEMPLATES: tuple[tuple[str, Template], ...] = (
    ("margin", _MARGIN),
    ("base_em", _BASE_EM),
    ("font", _FONT),
    ("background_color", _BACKGROUND_COLOR),
    ("paragraph_margin", _PARAGRAPH_MARGIN),
    ("foreground_color", _FOREGROUND_COLOR),
    ("headercolor", _HEADERCOLOR),
    ("accent_color", _ACCENT_COLOR),
)


def _format(value: object) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def wizard_css(settings: WizardSettings) -> str:
    """Concatenate the fragment of every knob that is set."""
    css = ""
    for name, template in _TEMPLATES:
        value = getattr(settings, name)
        if value is None or value == "":
            continue
        css += template.substitute(value=_format(value))
    return css
