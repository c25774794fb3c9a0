"""Tests for program normalization."""

import pytest

from stylusport.analysis import (
    BasicBody,
    InitializeOperation,
    IssueSeverity,
    SCHEMA_VERSION,
    TransferOperation,
    UnknownBody,
    normalize,
)
from stylusport.analysis.normalizer import (
    extract_context_type,
    extract_program_name,
    generate_program_id,
)
from stylusport.core.errors import ErrorKind, MissingInfoError
from stylusport.parser import parse_file, parse_str
from stylusport.parser.models import AccountStruct, Program, ProgramModule


class TestHelloWorld:

    def test_shape(self, hello_world_program):
        normalized = normalize(hello_world_program)

        assert normalized.name == "hello_world"
        assert normalized.schema_version == SCHEMA_VERSION
        assert len(normalized.modules) == 1
        assert len(normalized.account_structs) == 1
        assert normalized.raw_accounts == []

    def test_no_issues(self, hello_world_program):
        normalized = normalize(hello_world_program)

        assert normalized.validation_issues == []
        assert not normalized.has_errors()

    def test_instruction_linked(self, hello_world_program):
        ix = normalize(hello_world_program).find_instruction("initialize")

        assert ix.account_struct_name == "Initialize"
        assert ix.get_context_parameter().name == "ctx"
        # an empty account struct implies no operations
        assert isinstance(ix.body, UnknownBody)

    def test_input_not_modified(self, hello_world_program):
        before = hello_world_program.to_dict()
        normalize(hello_world_program)

        assert hello_world_program.to_dict() == before

    def test_deterministic(self, hello_world_program):
        assert normalize(hello_world_program).to_dict() == normalize(hello_world_program).to_dict()


class TestTokenProgram:

    def test_duplicate_mint(self, token_program):
        normalized = normalize(token_program)

        errors = normalized.issues_by_severity(IssueSeverity.ERROR)
        assert [e.message for e in errors] == ["Duplicate account name: Mint"]
        assert errors[0].element == "Mint"

    def test_no_reference_warnings(self, token_program):
        normalized = normalize(token_program)

        assert normalized.issues_by_severity(IssueSeverity.WARNING) == []

    def test_initialize_operation(self, token_program):
        ix = normalize(token_program).find_instruction("initialize")

        assert isinstance(ix.body, BasicBody)
        assert ix.operations() == [InitializeOperation(target="mint", payer="authority")]

    def test_transfer_operation(self, token_program):
        ix = normalize(token_program).find_instruction("transfer")

        assert ix.operations() == [TransferOperation(from_account="from", to_account="to")]

    def test_mint_has_no_operations(self, token_program):
        ix = normalize(token_program).find_instruction("mint")

        assert isinstance(ix.body, UnknownBody)

    def test_explicit_constraints_copied(self, token_program):
        normalized = normalize(token_program)
        mint = normalized.find_account_struct("Initialize").find_field("mint")

        explicit = [c for c in mint.constraints if not c.is_inferred]
        assert [(c.constraint_type, c.value) for c in explicit] == [("init", None), ("payer", "authority")]
        assert mint.inferred_info.is_initialized
        assert mint.inferred_info.related_account == "authority"


class TestInvalidPrograms:

    def test_missing_context_link(self, make_invalid_program):
        normalized = normalize(make_invalid_program(valid_instructions=True))

        assert normalized.find_instruction("initialize").account_struct_name == "Initialize"
        assert normalized.validation_issues == []

    def test_instruction_without_context(self, make_invalid_program):
        normalized = normalize(make_invalid_program(valid_instructions=False))

        ix = normalized.find_instruction("invalid")
        assert ix.account_struct_name is None
        assert not ix.has_context_parameter()
        assert normalized.validation_issues == []

    def test_no_module_no_path(self, make_invalid_program):
        with pytest.raises(MissingInfoError) as exc_info:
            normalize(make_invalid_program(include_module=False))

        assert exc_info.value.kind == ErrorKind.MISSING_INFO
        assert str(exc_info.value) == "Missing information: Could not determine program name"

    def test_name_from_source_path(self, make_invalid_program):
        program = make_invalid_program(include_module=False)
        program.source_path = "programs/escrow/src/escrow.rs"

        normalized = normalize(program)

        assert normalized.name == "escrow"
        assert normalized.id == "program:programs/escrow/src/escrow.rs"
        assert normalized.source_info.file_path == "programs/escrow/src/escrow.rs"

    def test_dangling_reference(self, hello_world_program):
        hello_world_program.modules[0].instructions[0].context_type = "Missing"

        normalized = normalize(hello_world_program)

        warnings = normalized.issues_by_severity(IssueSeverity.WARNING)
        assert [w.message for w in warnings] == [
            "Instruction initialize references undefined account struct Missing",
        ]

    def test_duplicate_account_struct(self, hello_world_program):
        hello_world_program.account_structs.append(AccountStruct(name="Initialize"))

        errors = normalize(hello_world_program).issues_by_severity(IssueSeverity.ERROR)

        assert [e.message for e in errors] == ["Duplicate account struct name: Initialize"]


class TestProgramIdentity:

    def test_first_module_names_program(self, hello_world_program):
        hello_world_program.modules.append(ProgramModule(name="second"))

        assert extract_program_name(hello_world_program) == "hello_world"

    def test_id_from_module(self, hello_world_program):
        assert generate_program_id(hello_world_program) == "program:hello_world"

    def test_id_from_path(self, hello_world_program):
        hello_world_program.source_path = "lib.rs"

        assert generate_program_id(hello_world_program) == "program:lib.rs"

    def test_id_fallback(self):
        assert generate_program_id(Program()).startswith("program:")


class TestLinking:

    def test_existing_reference_kept(self, hello_world_program):
        ix = hello_world_program.modules[0].instructions[0]
        ix.context_type = "Initialize"
        ix.parameters[0].ty = "Context<Other>"

        normalized = normalize(hello_world_program)

        assert normalized.find_instruction("initialize").account_struct_name == "Initialize"

    def test_reference_from_parameter(self, hello_world_program):
        hello_world_program.modules[0].instructions[0].context_type = None

        normalized = normalize(hello_world_program)

        assert normalized.find_instruction("initialize").account_struct_name == "Initialize"

    def test_unresolvable_context_warns(self, hello_world_program):
        ix = hello_world_program.modules[0].instructions[0]
        ix.context_type = None
        ix.parameters[0].ty = "Context"

        normalized = normalize(hello_world_program)

        assert [w.message for w in normalized.validation_issues] == [
            "Instruction initialize has Context parameter but no associated account struct",
        ]

    @pytest.mark.parametrize("ty,expected", [
        ("Context<Initialize>", "Initialize"),
        ("&mut Context<Initialize>", "Initialize"),
        ("Context<'info,Deposit<'info>>", "Deposit"),
        ("Context<Wrapper<u8>>", "Wrapper<u8>"),
        ("Context", None),
        ("Context<A,B>", None),
    ])
    def test_extract_context_type(self, ty, expected):
        assert extract_context_type(ty) == expected


class TestFromSource:

    def test_token_vault(self, token_vault_path):
        normalized = normalize(parse_file(token_vault_path))

        assert normalized.name == "token_vault"
        assert normalized.source_info.file_path == str(token_vault_path)
        assert normalized.find_instruction("initialize").operations() == [
            InitializeOperation(target="vault", payer="authority"),
        ]
        # module is private but instructions are pub
        assert normalized.validation_issues == []

    def test_multiple_program_modules(self):
        program = parse_str(
            "#[program]\n"
            "mod first { pub fn a(ctx: Context<A>) -> Result<()> { Ok(()) } }\n"
            "#[program]\n"
            "mod second { pub fn b(ctx: Context<B>) -> Result<()> { Ok(()) } }\n"
            "#[derive(Accounts)]\n"
            "pub struct A {}\n"
        )

        normalized = normalize(program)

        assert normalized.name == "first"
        assert [m.name for m in normalized.modules] == ["first", "second"]
        assert [w.message for w in normalized.validation_issues] == [
            "Instruction b references undefined account struct B",
        ]

    def test_lifetime_context_links_to_struct(self):
        program = parse_str(
            "#[program]\n"
            "mod vault {\n"
            "    pub fn initialize(ctx: Context<'_, '_, '_, 'info, Init<'info>>) -> Result<()> { Ok(()) }\n"
            "}\n"
            "#[derive(Accounts)]\n"
            "pub struct Init<'info> {\n"
            "    #[account(init, payer = user)]\n"
            "    pub vault: Account<'info, Vault>,\n"
            "    #[account(mut)]\n"
            "    pub user: Signer<'info>,\n"
            "}\n"
        )

        normalized = normalize(program)

        ix = normalized.find_instruction("initialize")
        assert ix.account_struct_name == "Init"
        assert ix.operations() == [InitializeOperation(target="vault", payer="user")]
        assert normalized.validation_issues == []
