import freezegun
import freezegun.config

# freezegun's default ignore list contains "gi" (PyGObject) and matches it as a
# module-name prefix, which also matches "gigmatch" and leaves its clock unfrozen.
freezegun.configure(
    default_ignore_list=[m for m in freezegun.config.DEFAULT_IGNORE_LIST if m != "gi"]
)
