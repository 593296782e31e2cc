"""Exception classes for xlrelease_ci errors"""


def is_sequence(arg):
    return (not hasattr(arg, "strip") and
            (hasattr(arg, "__getitem__") or
             hasattr(arg, "__iter__")))


class XLReleaseException(Exception):
    pass


class NotFoundError(XLReleaseException):
    pass


class CredentialNotFoundError(NotFoundError):

    def __init__(self, name):
        self.name = name
        super(CredentialNotFoundError, self).__init__(
            "No XL Release server is configured for credential '{0}'".format(
                name))


class TemplateNotFoundError(NotFoundError):

    def __init__(self, title_filter, server_url=None):
        self.title_filter = title_filter
        message = "No release template title contains '{0}'".format(
            title_filter)
        if server_url:
            message += " on {0}".format(server_url)
        super(TemplateNotFoundError, self).__init__(message)


class EmptyRegistryError(XLReleaseException):
    pass


class ConnectivityError(XLReleaseException):
    """Raised when the XL Release server could not be reached at all."""
    pass


class RemoteError(XLReleaseException):
    """Raised when the XL Release server answered with a non-success status.
    """

    def __init__(self, status_code, reason, url, body=None):
        self.status_code = status_code
        self.reason = reason
        self.url = url
        self.body = body
        message = "Error in request to {0}: [{1}] {2}".format(
            url, status_code, reason)
        if status_code in (401, 403):
            message += ". Possibly authentication failed"
        if body:
            message += "\n" + body
        super(RemoteError, self).__init__(message)


class SerializationError(XLReleaseException):
    pass


class XLReleaseConfigException(XLReleaseException):
    pass


class MissingAttributeError(XLReleaseException):

    def __init__(self, missing_attribute, step_name='xlrelease'):
        if is_sequence(missing_attribute):
            message = "One of {0} must be present in '{1}'".format(
                ', '.join("'{0}'".format(value)
                          for value in missing_attribute), step_name)
        else:
            message = "Missing {0} from an instance of '{1}'".format(
                missing_attribute, step_name)

        super(MissingAttributeError, self).__init__(message)


class InvalidAttributeError(XLReleaseException):

    def __init__(self, attribute_name, value, valid_values=None,
                 step_name='xlrelease', hint=None):
        message = "'{0}' is an invalid value for attribute {1}.{2}".format(
            value, step_name, attribute_name)

        if is_sequence(valid_values):
            message += "\nValid values include: {0}".format(
                ', '.join("'{0}'".format(value)
                          for value in valid_values))
        if hint:
            message += "\n{0}".format(hint)

        super(InvalidAttributeError, self).__init__(message)
