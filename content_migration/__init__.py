"""
Top-level package for the content store hierarchy migration utility.

This package turns the two trees a CMS exposes for a content store page (the
raw ``jcr:content`` repository tree and the rendering-oriented component
model) into one canonical, navigable hierarchy that downstream document
generation can consume.  Modules are split into subpackages:

* :mod:`content_migration.models` – input tree nodes and output hierarchy models
* :mod:`content_migration.extractors` – document loading, repository indexing,
  tabs model combination and banner image discovery
* :mod:`content_migration.parsers` – markup cleanup helpers
* :mod:`content_migration.hierarchy` – enrichment, building, normalization and
  section grouping
* :mod:`content_migration.utils` – paths, event reports and logging

Nothing below :mod:`content_migration.hierarchy` performs I/O; loading files
and writing results is handled by :mod:`content_migration.migration_tool`.
"""
