from refdedup.core.models import OperationKind

OPERATION_ALIASES = {
    "duplicate": OperationKind.DUPLICATE,
    "duplicates": OperationKind.DUPLICATE,
    "originals": OperationKind.ORIGINALS,
    "unique": OperationKind.ORIGINALS,
}

OPERATION_CHOICES = list(OPERATION_ALIASES.keys())

OPERATION_HELP_TEXT = (
    "Selection rule applied to candidate files:\n"
    "  duplicate  : files whose content also exists in the reference tree\n"
    "  originals  : files with no byte-equal counterpart in the reference tree\n"
    "Example    : %(prog)s -r ~/Photos -c /mnt/usb --operation originals\n"
)

DISPLAY_LIMIT = 50000

EPILOG_TEXT = """
Examples:
  List files on a USB stick that already exist in ~/Photos
  %(prog)s -r ~/Photos -c /mnt/usb

  List files on two backup drives that are missing from ~/Photos
  %(prog)s -r ~/Photos -c /mnt/backup1 /mnt/backup2 -o originals

  Move duplicates on the USB stick to trash (with confirmation prompts)
  %(prog)s -r ~/Photos -c /mnt/usb --delete

  Same as above without confirmation and deleting permanently (for scripts)
  %(prog)s -r ~/Photos -c /mnt/usb --delete --force --permanent

  Keep comparing other candidate folders against the same reference tree
  %(prog)s -r ~/Photos -c /mnt/usb --repeat
"""
