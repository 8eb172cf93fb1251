from linear_changelog.cli import cli

cli(prog_name="linear-changelog")
