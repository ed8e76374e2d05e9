"""Exceptions raised by the octavm interpreter."""


class OctavmError(Exception):
    pass


class InvalidProgramError(OctavmError):
    """Fatal condition caused by the running program.

    The machine must not be stepped again after one of these is raised. The
    address is the program counter of the offending instruction and the opcode
    its raw 16 bits; both are filled in by the dispatcher when the helper that
    detected the problem did not know them.
    """

    def __init__(self, message: str, address: int | None = None, opcode: int | None = None):
        super().__init__(message)
        self.message = message
        self.address = address
        self.opcode = opcode

    def locate(self, address: int, opcode: int) -> "InvalidProgramError":
        if self.address is None:
            self.address = address
        if self.opcode is None:
            self.opcode = opcode
        return self

    def __str__(self) -> str:
        if self.address is None or self.opcode is None:
            return self.message
        return f"{self.message} at 0x{self.address:03X} (opcode 0x{self.opcode:04X})"


class InvalidOpcodeError(InvalidProgramError):
    pass


class UnsupportedMachineCodeError(InvalidOpcodeError):
    pass


class StackError(InvalidProgramError):
    pass


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


class ProgramTooLargeError(OctavmError):
    pass
