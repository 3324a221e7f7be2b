QUICK_CORE_PROFILE_PATH = "http://hl7.org/fhir/Profile/"
MAP_IDENTITY = "quick"

HL7_CONTACT = "http://www.hl7.org"
PROFILE_STATUS = "draft"

ROOT_TYPE_CODE = "Resource"
EXTENSION_TYPE_CODE = "Extension"
EXTENSION_CONTEXT_TYPE = "resource"
EXTENSION_CONTEXT = "Any"
MODIFIER_EXTENSION = "modifierExtension"

UNBOUNDED = -1

# Shared metadata keys
PROFILE_ROOT_PATH = "profileRootPath"
PROFILE_BASE_VERSION = "profileBaseVersion"
PROFILE_PUBLISHER = "profilePublisher"
PROFILE_CONTACT = "profileContact"
PROFILE_FHIR_VERSION = "profileFhirVersion"

# Per-target metadata keys
PROFILE_DESCRIPTION = "profileDescription"
PROFILE_REQUIREMENTS = "profileRequirements"
CONSTRAIN_MODIFYING_EXTENSIONS = "constrainModifyingExtensions"
