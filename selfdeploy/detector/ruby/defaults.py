"""Default commands for Ruby project types."""

BUILD_CMD = "bundle install"

# Default test tool and command when the Gemfile names no test suite
DEFAULT_TEST_TOOL = "rspec"
DEFAULT_TEST_CMD = "bundle exec rspec"

# Files and directories that only a Rails application carries
RAILS_MARKERS: tuple[str, ...] = (
    "bin/rails",
    "config.ru",
    "app/controllers",
    "app/models",
    "config/application.rb",
)
