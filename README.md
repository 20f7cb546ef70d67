# osxclean

A command-line tool for macOS that removes applications and command-line
tools together with their leftover files, and clears junk from common system
locations: system and user caches, temporary files, user logs, crash reports,
trash bins and browser caches (Chrome, Firefox, Brave). It also finds large
files in your home folders.

## Installation

```
pip install .
```

This installs the `osx` command.

## Usage

Preview what a cleanup would reclaim, without deleting anything:

```
osx --dry-run clean-my-mac
```

Run the cleanup, skipping any path that contains one of the given substrings
(comma-separated; `-i`/`--ignore` may also be repeated):

```
osx clean-my-mac --ignore Chrome,Firefox
```

At the end a summary table lists the reclaimed space per cleaner and path,
followed by a table of failures, if any.

Uninstall an application or command-line tool and its related files
(application bundle, support files, preferences, caches, logs, plug-in
folders, binaries, libraries, manual pages, Homebrew cellar entries, launch
agents and daemons, and package receipts):

```
osx --dry-run uninstall Slack
osx uninstall Slack
```

Paths that do not exist are skipped.

Compare the installed version with the latest published release:

```
osx version
```

The release to compare against is read from the GitHub repository named in
the `OSXCLEAN_RELEASE_REPO` environment variable, in the form `owner/name`;
without it the check reports an error.

Print the installed version only:

```
osx --version
```

`--dry-run` and `--debug` may be given before or after the command. `--debug`
turns on detailed tracing.

## Environment variables

- `OSX_SHOW_WARNINGS` – print warnings (hidden by default).
- `OSX_SHOW_DETAILS` – log every removed path during a real cleanup.
- `OSX_SHOW_SKIPPED` – print a table of paths skipped during the size check
  (also shown with `--debug`).
- `OSXCLEAN_RELEASE_REPO` – `owner/name` of the repository checked by
  `osx version`.
- `NO_COLOR` – print without colour codes.

## Notes

Large files (100 MiB and more in Downloads, Desktop, Documents, Movies, Music
and Pictures) are only listed in dry-run mode; a real run removes them along
with the other junk. The active `TMPDIR` is never removed. When System
Integrity Protection is enabled, some files cannot be removed and the tool
says so at the end of a cleanup.

## Limitations

- The uninstaller matches files by name only. It does not read an
  application's bundle identifier, so container and crash-report paths that
  contain `*` are checked literally and not expanded as wildcards.
- It does not check whether an application is running before removing it.
- Failed deletions during an uninstall are only logged as warnings; there is
  no summary table for them.