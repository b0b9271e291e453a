"""Tests for the handle table."""

from pytest import raises

from serialdump.stream.constants import BASE_WIRE_HANDLE
from serialdump.stream.errors import UnknownHandleError
from serialdump.stream.handles import HandleTable


def describe_handle_table():
    def mints_sequential_handles_from_base(expect):
        table = HandleTable()
        expect(table.mint()) == BASE_WIRE_HANDLE
        expect(table.mint()) == BASE_WIRE_HANDLE + 1
        expect(table.minted) == [0x7E0000, 0x7E0001]

    def resolves_registered_entities(expect):
        table = HandleTable()
        handle = table.mint()
        table.register(handle, "java.lang.String")
        expect(table.resolve(handle)) == "java.lang.String"
        expect(handle in table) == True
        expect(len(table)) == 1

    def registered_none_is_resolvable(expect):
        table = HandleTable()
        handle = table.mint()
        table.register(handle, None)
        expect(table.resolve(handle)) == None

    def rejects_unregistered_handles(expect):
        table = HandleTable()
        table.mint()
        with raises(UnknownHandleError):
            table.resolve(BASE_WIRE_HANDLE)
        with raises(UnknownHandleError):
            table.resolve(0)

    def rejects_registration_of_unminted_handles(expect):
        table = HandleTable()
        with raises(UnknownHandleError):
            table.register(BASE_WIRE_HANDLE, "x")

    def iterates_in_handle_order(expect):
        table = HandleTable(base=10)
        first, second = table.mint(), table.mint()
        table.register(second, "b")
        table.register(first, "a")
        expect(list(table)) == [10, 11]
