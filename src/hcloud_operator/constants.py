"""Constants for the Hetzner Cloud Operator."""

# API Group
API_GROUP = "hcloud.bunskin.com"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_NETWORK = "HcloudNetwork"
KIND_DNS_ZONE = "HcloudDnsZone"

# Plurals
PLURAL_NETWORK = "hcloudnetworks"
PLURAL_DNS_ZONE = "hclouddnszones"

# Annotations
ANNOTATION_SYNC_POLICY = "sync-policy"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Controller name used in logs and as field manager
CONTROLLER_NAME = "hcloud-operator"

# Condition Types
COND_AVAILABLE = "Available"

# Condition Reasons
REASON_READY = "Ready"
REASON_FAILED = "Failed"
REASON_PROGRESSING = "Progressing"
REASON_DELETION_FAILED = "DeletionFailed"
REASON_INVALID_SYNC_POLICY = "InvalidSyncPolicy"
REASON_INVALID_SPEC = "InvalidSpec"
REASON_NOT_CONFIGURED = "NotConfigured"

# Event Reasons
EVENT_REASON_CREATED = "Created"
EVENT_REASON_ADOPTED = "Adopted"
EVENT_REASON_UPDATED = "Updated"
EVENT_REASON_DELETED = "Deleted"
EVENT_REASON_ORPHANED = "Orphaned"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_DELETION_FAILED = "DeletionFailed"

# Zone modes
ZONE_MODE_PRIMARY = "PRIMARY"
ZONE_MODE_SECONDARY = "SECONDARY"
ZONE_MODES = (ZONE_MODE_PRIMARY, ZONE_MODE_SECONDARY)
