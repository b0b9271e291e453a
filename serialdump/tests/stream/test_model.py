"""Tests for the class descriptor model."""

from pytest import raises

from serialdump.stream.errors import IllegalClassDescFlagsError, IllegalFieldTypeCodeError
from serialdump.stream.model import (
    BackReference,
    ClassDescFlags,
    ClassDescriptor,
    ClassDescriptorChain,
    FieldDescriptor,
    TypeCode,
)

VALID_FLAGS = {0x00, 0x01, 0x02, 0x03, 0x04, 0x0C}


def describe_class_desc_flags():
    def accepts_exactly_the_valid_combinations(expect):
        accepted = set()
        for value in range(256):
            try:
                ClassDescFlags.parse(value)
            except IllegalClassDescFlagsError:
                continue
            accepted.add(value)
        expect(accepted) == VALID_FLAGS

    def explains_rejections(expect):
        with raises(IllegalClassDescFlagsError) as exinfo:
            ClassDescFlags.parse(0x06)
        expect(str(exinfo.value)).includes("not compatible with SC_EXTERNALIZABLE")

        with raises(IllegalClassDescFlagsError) as exinfo:
            ClassDescFlags.parse(0x05)
        expect(str(exinfo.value)).includes("not compatible with SC_WRITE_METHOD")

    def renders_set_bits(expect):
        flags = ClassDescFlags.parse(0x03)
        expect(flags.describe()) == "SC_WRITE_METHOD | SC_SERIALIZABLE"
        expect(ClassDescFlags(0).describe()) == ""


def describe_type_code():
    def maps_wire_bytes(expect):
        expect(TypeCode.from_byte(ord("I"))) == TypeCode.INT
        expect(TypeCode.from_byte(ord("J"))) == TypeCode.LONG
        expect(TypeCode.from_byte(ord("["))) == TypeCode.ARRAY
        expect(TypeCode.OBJECT.is_primitive) == False
        expect(TypeCode.BOOLEAN.is_primitive) == True

    def rejects_unknown_codes(expect):
        with raises(IllegalFieldTypeCodeError):
            TypeCode.from_byte(ord("X"))
        with raises(IllegalFieldTypeCodeError):
            TypeCode.from_byte(0)


def describe_class_descriptor_chain():
    def copy_keeps_layout_and_drops_values(expect):
        cd = ClassDescriptor(
            name="Point",
            flags=ClassDescFlags.SERIALIZABLE,
            serial_version_uid=42,
            handle=0x7E0000,
            fields=[FieldDescriptor(TypeCode.INT, "x", value=3)],
        )
        chain = ClassDescriptorChain([cd])

        copied = chain.copy()
        expect(copied[0].name) == "Point"
        expect(copied[0].serial_version_uid) == 42
        expect(copied[0].handle) == 0x7E0000
        expect(copied[0].fields) == [FieldDescriptor(TypeCode.INT, "x")]

        copied[0].fields[0].value = 7
        copied[0].add_field(FieldDescriptor(TypeCode.INT, "y"))
        expect(cd.fields) == [FieldDescriptor(TypeCode.INT, "x", value=3)]

    def names_the_most_derived_class(expect):
        chain = ClassDescriptorChain()
        expect(chain.name) == None
        chain.add_class(ClassDescriptor("Child"))
        chain.add_superclass_chain(ClassDescriptorChain([ClassDescriptor("Parent")]))
        chain.add_superclass_chain(None)
        expect(chain.name) == "Child"
        expect([cd.name for cd in chain]) == ["Child", "Parent"]
        expect(chain.find("Parent").name) == "Parent"
        expect(chain.find("Missing")) == None

    def looks_up_fields_by_name(expect):
        cd = ClassDescriptor("Point", fields=[FieldDescriptor(TypeCode.INT, "x", value=1)])
        expect(cd.get_field("x").value) == 1
        expect(cd.get_field("z")) == None

    def back_references_ignore_their_target_in_comparisons(expect):
        chain = ClassDescriptorChain([ClassDescriptor("Node")])
        expect(BackReference(1, chain)) == BackReference(1, None)
        expect("target" in repr(BackReference(1, chain))) == False
