class NetworkError(Exception):
    """Represents a failure to get an answer from CloudAPI

    Attributes:
        message (str): A description of the failure
        cause (Exception): The underlying exception raised by the transport, if any
    """
    def __init__(self, message, cause=None):
        super(NetworkError, self).__init__(message)

        self.message = message
        self.cause = cause

    def __str__(self):
        return self.message

    def __repr__(self):
        return '<{0}; Message: {1}>'.format(
            self.__class__.__name__,
            self.message
        )


class APIError(NetworkError):
    """Represents an error returned in a response to a CloudAPI call

    This exception will be raised any time a response code >= 300 is returned

    Attributes:
        code (int): The response code
        rest_code (str): The CloudAPI error code, for example 'ResourceNotFound'
        message(str): The message included with the error response
        http_error(googleapiclient.errors.HttpError): The underlying exception that caused this exception to be raised
                                                      If you need access to the raw response, this is where you'll find
                                                      it.
    """
    def __init__(self, code, message, http_error, rest_code=None):
        """Construct an exception representing an error returned by CloudAPI

        Args:
            code (int): The response code
            message(str): The message included with the error response
            http_error(googleapiclient.errors.HttpError): The underlying exception that caused this exception
                                                          to be raised.
            rest_code (str, optional): The CloudAPI error code
        """
        super(APIError, self).__init__(message, cause=http_error)

        self.code = code
        self.rest_code = rest_code
        self.http_error = http_error

    def __str__(self):
        # Return a string like r'VM not found (404)'
        return '{1} ({0})'.format(
            self.code,
            self.message
        )

    def __repr__(self):
        # Return a string like r'<APIError; Code: 404; Message: VM not found>'
        return '<{0}; Code: {1}; Message: {2}>'.format(
            self.__class__.__name__,
            self.code,
            self.message
        )


class MachineNotFound(APIError):
    """CloudAPI has no machine with the requested id, or the machine was destroyed"""
