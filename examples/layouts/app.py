"""File-based templates -- the most common real-world pattern.

Loads templates from disk, demonstrates layouts (extends/section/fill),
includes, embeds and ``each`` over a partial. The about page includes a
partial that does not exist to show the inline error marker.

Run:
    python app.py
"""

import logging
from pathlib import Path

from vellum import Environment

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

templates_dir = Path(__file__).parent / "templates"
env = Environment(path=templates_dir)
env.globals.set_all(
    {
        "site": {"name": "My Site"},
        "nav_items": [
            {"url": "/", "label": "Home"},
            {"url": "/about", "label": "About"},
        ],
    }
)

home_output = env.render(
    "home.html",
    title="Welcome",
    message="This is a vellum-powered site with layouts.",
    posts=[
        {"title": "first post", "draft": False},
        {"title": "work in progress", "draft": True},
    ],
)

about_output = env.render(
    "about.html",
    title="About Us",
    team={"name": "The Team", "description": "Built with vellum."},
)


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)


if __name__ == "__main__":
    main()
