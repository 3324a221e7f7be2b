class ProfileGeneratorError(Exception):
    pass


class MappingContractViolation(ProfileGeneratorError):
    pass


class InitializationError(MappingContractViolation):
    pass


class MappingNotFound(ProfileGeneratorError):
    pass


class SerializationFailure(ProfileGeneratorError):
    pass


class ProfileExportError(ProfileGeneratorError):
    pass
