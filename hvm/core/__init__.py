"""
Core logic of hvm: semantic versions, specifier resolution and the
acquisition pipeline.
"""
