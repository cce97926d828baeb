"""GATE 2: Holder Access — кто может выпускать shares в пользу получателя

Проверки (в порядке):
1. Получатель не пустой
2. Caller == получатель, либо caller одобрен как оператор получателя
3. Если allow-list включен — получатель одобрен
"""

from dataclasses import dataclass

from src.core.domain.assets import is_null
from src.core.errors import CallerNotAllowedError, InvalidOperatorError, InvalidRecipientError

BLOCK_NULL_RECIPIENT = "null_recipient"
BLOCK_OPERATOR_NOT_APPROVED = "operator_not_approved"
BLOCK_RECIPIENT_NOT_ALLOWED = "recipient_not_allowed"


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    entry_allowed: bool
    block_reason: str
    details: str


class Gate02HolderAccess:
    """GATE 2: Holder Access."""

    def evaluate(
        self,
        caller: str,
        recipient: str,
        operator_approved: bool,
        allow_list_approved: bool,
    ) -> Gate02Result:
        """
        Args:
            caller: инициатор операции
            recipient: получатель shares
            operator_approved: caller одобрен получателем как оператор
            allow_list_approved: получатель проходит allow-list (True если gate выключен)
        """
        if is_null(recipient):
            return Gate02Result(
                entry_allowed=False,
                block_reason=BLOCK_NULL_RECIPIENT,
                details="GATE 2 BLOCK: recipient is null",
            )

        if caller != recipient and not operator_approved:
            return Gate02Result(
                entry_allowed=False,
                block_reason=BLOCK_OPERATOR_NOT_APPROVED,
                details=f"GATE 2 BLOCK: {caller} is not an operator of {recipient}",
            )

        if not allow_list_approved:
            return Gate02Result(
                entry_allowed=False,
                block_reason=BLOCK_RECIPIENT_NOT_ALLOWED,
                details=f"GATE 2 BLOCK: {recipient} not approved by allow list",
            )

        return Gate02Result(entry_allowed=True, block_reason="", details="GATE 2 PASS")


_ERRORS = {
    BLOCK_NULL_RECIPIENT: InvalidRecipientError,
    BLOCK_OPERATOR_NOT_APPROVED: InvalidOperatorError,
    BLOCK_RECIPIENT_NOT_ALLOWED: CallerNotAllowedError,
}


def check_holder_access(
    caller: str, recipient: str, operator_approved: bool, allow_list_approved: bool
) -> Gate02Result:
    """
    GATE 2 с исключением вместо результата.

    Raises:
        InvalidRecipientError, InvalidOperatorError, CallerNotAllowedError
    """
    result = Gate02HolderAccess().evaluate(
        caller, recipient, operator_approved, allow_list_approved
    )
    if not result.entry_allowed:
        raise _ERRORS[result.block_reason](result.details)
    return result
