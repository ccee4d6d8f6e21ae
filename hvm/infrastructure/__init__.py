"""
Infrastructure layer for hvm: logging, errors, configuration loading,
archive extraction, the version cache and the pin file.
"""
