"""Scraper for the dependents of a GitHub repository.

GitHub lists the repositories depending on a repository at
``/<owner>/<repo>/network/dependents``, 30 per page. This package walks that
listing and yields one record per dependent, keeping parsing (the extract
modules) separate from I/O (the drivers).

See github_dependents.dependents for the entry points.
"""
