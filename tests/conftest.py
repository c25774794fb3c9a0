"""Shared fixtures for the stylusport test suite."""

from pathlib import Path

import pytest

from stylusport.parser.models import (
    AccountField,
    AccountStruct,
    Constraint,
    Instruction,
    Parameter,
    Program,
    ProgramModule,
    RawAccount,
    RawAccountField,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def context_param(struct_name: str, name: str = "ctx") -> Parameter:
    return Parameter(name=name, ty=f"Context<{struct_name}>", is_context=True)


def instruction(name: str, struct_name: str, *extra: Parameter) -> Instruction:
    return Instruction(
        name=name,
        visibility="pub",
        parameters=[context_param(struct_name), *extra],
        return_type="Result<()>",
        context_type=struct_name,
    )


# ── Source Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def token_vault_path() -> Path:
    """Path to the token vault Anchor program."""
    return FIXTURES_DIR / "token_vault" / "lib.rs"


@pytest.fixture
def token_vault_source(token_vault_path) -> str:
    return token_vault_path.read_text(encoding="utf-8")


# ── Program Model Fixtures ───────────────────────────────────────────────────


@pytest.fixture
def hello_world_program() -> Program:
    """A single instruction linked to an empty account struct."""
    module = ProgramModule(name="hello_world", visibility="")
    module.instructions.append(instruction("initialize", "Initialize"))

    return Program(
        modules=[module],
        account_structs=[AccountStruct(name="Initialize", visibility="pub")],
    )


@pytest.fixture
def token_program() -> Program:
    """A token program with three instructions and two raw accounts."""
    amount = Parameter(name="amount", ty="u64")

    module = ProgramModule(name="token_program", visibility="pub")
    module.instructions.extend([
        instruction("initialize", "Initialize"),
        instruction("mint", "Mint", amount),
        instruction("transfer", "Transfer", amount),
    ])

    initialize = AccountStruct(name="Initialize", visibility="pub", fields=[
        AccountField("authority", "Signer<'info>", [Constraint("signer")]),
        AccountField("mint", "Account<'info,Mint>", [
            Constraint("init"),
            Constraint("payer", "authority"),
        ]),
        AccountField("system_program", "Program<'info,System>"),
    ])

    mint = AccountStruct(name="Mint", visibility="pub", fields=[
        AccountField("authority", "Signer<'info>", [Constraint("signer")]),
        AccountField("mint", "Account<'info,Mint>", [Constraint("mut")]),
        AccountField("to", "Account<'info,TokenAccount>", [Constraint("mut")]),
    ])

    transfer = AccountStruct(name="Transfer", visibility="pub", fields=[
        AccountField("authority", "Signer<'info>", [Constraint("signer")]),
        AccountField("from", "Account<'info,TokenAccount>", [Constraint("mut")]),
        AccountField("to", "Account<'info,TokenAccount>", [Constraint("mut")]),
    ])

    token_account = RawAccount(name="TokenAccount", visibility="pub", fields=[
        RawAccountField("owner", "Pubkey", "pub"),
        RawAccountField("amount", "u64", "pub"),
    ])
    mint_raw = RawAccount(name="Mint", visibility="pub", fields=[
        RawAccountField("authority", "Pubkey", "pub"),
        RawAccountField("supply", "u64", "pub"),
    ])

    return Program(
        modules=[module],
        account_structs=[initialize, mint, transfer],
        raw_accounts=[token_account, mint_raw],
    )


@pytest.fixture
def make_invalid_program():
    """Factory for programs with deliberate problems."""

    def _make(include_module: bool = True, valid_instructions: bool = True) -> Program:
        program = Program()

        if include_module:
            module = ProgramModule(name="invalid_program", visibility="pub")
            if valid_instructions:
                module.instructions.append(Instruction(
                    name="initialize",
                    visibility="pub",
                    parameters=[context_param("Initialize")],
                    return_type="Result<()>",
                ))
            else:
                module.instructions.append(Instruction(
                    name="invalid",
                    visibility="pub",
                    parameters=[Parameter(name="value", ty="u64")],
                    return_type="Result<()>",
                ))
            program.modules.append(module)

        program.account_structs.append(AccountStruct(name="Initialize", visibility="pub"))
        return program

    return _make
