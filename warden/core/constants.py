"""Core constants: cache key structure and permission cache compaction.

Single source of truth for cache key format and alias alphabets.
"""

# Cache key suffix for the single process-wide permission entry
CACHE_SUFFIX_PERMISSIONS = "permissions"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Alias alphabets for compact cache records. The ranges are disjoint so that
# permission-field codes and role-field codes never collide in the shared table.
PERMISSION_ALIAS_ALPHABET = tuple("abcdefgh")
ROLE_ALIAS_ALPHABET = tuple("jklmnop")

# Reserved alias for the permission -> roles relation
ROLES_RELATION_FIELD = "roles"
ROLES_RELATION_ALIAS = "r"

# Never serialized into the permission cache entry
CACHE_EXCLUDED_FIELDS = frozenset({"created_at", "updated_at", "deleted_at"})

# Delimiter for permission lists in middleware-style strings ("posts.edit|posts.delete")
PERMISSION_LIST_SEP = "|"
