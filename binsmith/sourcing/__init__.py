"""Sourcing collaborators: fetchers, builder, downloads, archives and git.

``binsmith.sourcing.fetchers.materialize`` is the single entry point used by
``SourcedBinary.source()``; everything else here supports it.
"""
