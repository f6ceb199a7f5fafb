"""Custom filters -- extending vellum with register_filter.

A filter is any ``(value, arg) -> value`` callable; ``arg`` is the text
after ``:`` in the template, or None. Registered filters shadow the
built-ins of the same name.

Run:
    python app.py
"""

from vellum import DictLoader, Environment

env = Environment(
    loader=DictLoader(
        {
            "invoice.html": (
                "{{ count }} {{ count | pluralize:'item,items' }}, "
                "total {{ total | money:'€' }}, "
                "{{ customer | default:'guest' | upper }}"
            ),
        }
    )
)


def money(value, arg):
    """Format a number as currency; ``arg`` is the symbol (default ``$``)."""
    return f"{arg or '$'}{float(value):,.2f}"


def pluralize(value, arg):
    """``arg`` is ``singular,plural``."""
    singular, _, plural = (arg or ",s").partition(",")
    return singular if value == 1 else plural


env.register_filter("money", money)
env.filters["pluralize"] = pluralize

output = env.render("invoice.html", count=3, total=1234.5, customer="acme")
single = env.render("invoice.html", count=1, total=5)


def main() -> None:
    print(output)
    print(single)


if __name__ == "__main__":
    main()
