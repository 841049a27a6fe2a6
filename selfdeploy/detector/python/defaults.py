"""Default commands and indicator tables for Python project types."""

# Descriptor files, in the order their contents are searched for a framework
DESCRIPTOR_FILES: tuple[str, ...] = ("pyproject.toml", "requirements.txt", "Pipfile", "setup.py")

# Framework names searched in descriptor contents. First match wins.
DESCRIPTOR_FRAMEWORKS: list[tuple[str, str]] = [
    ("django", "django"),
    ("fastapi", "fastapi"),
    ("flask", "flask"),
]

# Framework names searched in source files when descriptors name none.
SOURCE_FRAMEWORKS: list[tuple[str, str]] = [
    ("fastapi", "fastapi"),
    ("flask", "flask"),
    ("django", "django"),
]

BUILD_CMDS: dict[str, str] = {
    "poetry": "poetry build",
    "uv": "uv build",
    "pipenv": "pipenv install --deploy",
}

PIP_REQUIREMENTS_BUILD_CMD = "pip install -r requirements.txt"
PIP_PROJECT_BUILD_CMD = "pip install ."

DJANGO_TEST_CMD = "python manage.py test"
DEFAULT_TEST_CMD = "pytest"
