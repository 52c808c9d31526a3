"""
Error types for KeyCalc
Every calculator failure carries a stable code and a user-facing message
"""


class CalculatorError(Exception):
    """Base exception for calculator errors."""
    code = "CalculatorError"
    default_message = "Error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingOperand(CalculatorError):
    """Raised when an operator, equal, ')' or function has no number to act on."""
    code = "MissingOperand"
    default_message = "Enter a number first"


class InvalidNumberFormat(CalculatorError):
    """Raised when the pending input cannot be read as a number."""
    code = "InvalidNumberFormat"
    default_message = "Invalid number"


class UnbalancedParentheses(CalculatorError):
    """Raised when parentheses do not pair up at evaluation time."""
    code = "UnbalancedParentheses"
    default_message = "Unbalanced parentheses"


class UnmatchedParenthesis(UnbalancedParentheses):
    """Raised when ')' is entered with no open '(' left to close."""
    code = "UnmatchedParenthesis"
    default_message = "No open parenthesis to close"


class LeadingOperator(CalculatorError):
    code = "LeadingOperator"
    default_message = "Expression cannot start with an operator"


class TrailingOperator(CalculatorError):
    code = "TrailingOperator"
    default_message = "Expression cannot end with an operator"


class MalformedExpression(CalculatorError):
    code = "MalformedExpression"
    default_message = "Malformed expression"


class NoOperand(CalculatorError):
    code = "NoOperand"
    default_message = "Nothing to calculate"


class DivisionByZero(CalculatorError):
    code = "DivisionByZero"
    default_message = "Cannot divide by zero"


class NonFiniteResult(CalculatorError):
    code = "NonFiniteResult"
    default_message = "Result is undefined"


class InvalidFunctionInput(CalculatorError):
    """Raised when a unary function is applied outside its domain."""
    code = "InvalidFunctionInput"
    default_message = "Invalid input for function"


class UnknownAction(CalculatorError):
    """Raised when the presentation layer sends a key the controller does not know."""
    code = "UnknownAction"
    default_message = "Unknown action"


class HistoryEntryNotFound(CalculatorError):
    code = "HistoryEntryNotFound"
    default_message = "History entry not found"


class HistoryUnavailable(CalculatorError):
    """Raised when a history operation is requested on a calculator without history."""
    code = "HistoryUnavailable"
    default_message = "History is not available"
