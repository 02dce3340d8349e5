"""
HTML fragments rendered by the post limit module.
"""
from markupsafe import Markup

NOTICE_CLASS = "notice notice-warning is-dismissible"

PROFILE_SECTION_TEMPLATE = Markup("""<h3>Limit Posts</h3>
<table class="form-table">
  <tbody>
    <tr class="user-post-limit-wrap">
      <th><label for="{field}">Post Limit (0 for no limit)</label></th>
      <td>
        <input type="number" name="{field}" id="{field}" value="{value}" class="num" min="0">
      </td>
    </tr>
  </tbody>
</table>
""")

NOTICE_TEMPLATE = Markup('<div class="{css_class}"><p>{message}</p></div>')


def render_profile_section(field: str, value: int) -> Markup:
    return PROFILE_SECTION_TEMPLATE.format(field=field, value=value)


def render_notice(message: str, css_class: str = NOTICE_CLASS) -> Markup:
    return NOTICE_TEMPLATE.format(css_class=css_class, message=message)
