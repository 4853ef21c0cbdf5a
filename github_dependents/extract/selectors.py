"""XPath selectors for GitHub's network/dependents page.

Every selector here encodes an assumption about GitHub's markup. They are
external-contract assumptions: when GitHub changes the page, this is the
module to update.
"""


def has_class(name: str) -> str:
    """XPath predicate matching a whole token of the class attribute."""
    return (
        f"contains(concat(' ', normalize-space(@class), ' '), ' {name} ')"
    )


# Page layout: content area -> layout wrapper -> main column -> dependents
# section -> box holding the rows.
CONTENT_BOX = (
    f"//div[{has_class('repository-content')}]"
    f"/div[{has_class('gutter-condensed')}]"
    f"/div[{has_class('col-9')}]"
    "/div[@id='dependents']"
    f"/div[{has_class('Box')}]"
)

# Relative to the box.
ROWS = f"./div[{has_class('Box-row')}]"
HEADER_COUNT_LABEL = (
    f"./div[{has_class('Box-header')}]"
    f"//a[{has_class('btn-link')} and {has_class('selected')}]"
)

# Relative to a row.
AVATAR = "./img"
NAME_SPAN = "./span[1]"
NAME_LINKS = "./a"
DETAILS = f"./div[{has_class('flex-justify-end')}]"
DETAIL_LABELS = "./span"

# Relative to the document.
PAGINATION = (
    f"//div[{has_class('paginate-container')}]/div[{has_class('BtnGroup')}]"
)
PACKAGE_MENU_ITEMS = (
    f"//div[{has_class('select-menu-list')}]"
    f"//a[{has_class('select-menu-item')} and contains(@href, 'package_id=')]"
)

# Relative to the pagination group.
PAGINATION_BUTTONS = "./button"
PAGINATION_LINKS = "./a"
