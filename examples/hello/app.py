"""Hello World -- the simplest vellum example.

Compile a template from a string and render it with context variables.
No templates directory needed.

Run:
    python app.py
"""

from vellum import Environment

env = Environment()

# Compile from string
template = env.from_string("Hello, {{ name | ucfirst }}!")

# Render with context
output = template.render(name="world")


def main() -> None:
    print(output)
    print()

    # Multiple renders with different context
    for name in ["vellum", "layouts", "partials"]:
        print(template.render(name=name))


if __name__ == "__main__":
    main()
