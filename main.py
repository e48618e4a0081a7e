from rich.pretty import pprint

from argmatch import *

__prog__ = "gz"

cli = (
    Command("gz", "Git helpers", colorful=True)
    .arg(arg("-v --verbose").about("Enable verbose output"))
    .subcommand(
        Command("sync", "Sync current branch with origin/main")
        .arg(Arg.flag("force").short_alias("f").about("Force reset instead of pull"))
    )
    .subcommand(Command("stash", "Stash local changes including untracked files"))
    .subcommand(
        Command("uncommit", "Uncommit last N commits")
        .arg(Arg.positional("count").about("Number of commits to uncommit").default_value("1"))
    )
    .subcommand(
        Command("branch", "Create and switch to a new branch")
        .arg(Arg.positional("name").about("Branch name").required(True))
    )
    .subcommand(Command("done", "Switch back to main and delete current branch"))
    .subcommand_required()
)


if __name__ == '__main__':
    configure_logging()
    matches, error = cli.get_matches()
    trigger(error, shell=True)
    if not matches.help_requested:
        pprint(matches)
