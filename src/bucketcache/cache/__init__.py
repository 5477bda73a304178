"""
Cache package.

- bucketed.py: BucketedCache, the bucket-packing cache over one partition
- facade.py: NamedCacheFacade, session-over-org lookup
"""
