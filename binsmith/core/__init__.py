"""Resolution core: version ordering, version resolution and cache layout."""
