"""MCP tool surface forwarding each operation to the Binary Ninja plugin."""
import logging
from functools import lru_cache, wraps
from typing import Any, Callable, Literal, Optional

from ..binja.client import BinjaClient
from ..features import (
    binaries,
    comments,
    data,
    functions,
    listing,
    modify,
    rename,
    strings,
    types,
    values,
    xrefs,
)
from ..utils.errors import ErrorKind, InvalidArgument, is_error_text, render_error
from ..utils.logging import increment_counter, request_scope
from ._shared import inject_client
from .registry import Handler, OperationDefinition, OperationRegistry

ILView = Literal["hlil", "mlil", "llil"]


def _register_functions(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("list_methods", "List all function names in the program with pagination.")
    def list_methods(client: BinjaClient, offset: int = 0, limit: int = 100) -> str:
        return functions.list_methods(client, offset=offset, limit=limit)

    @op("get_entry_points", "List entry point(s) of the loaded binary.")
    def get_entry_points(client: BinjaClient) -> str:
        return functions.get_entry_points(client)

    @op(
        "search_functions_by_name",
        "Search for functions whose name contains the given substring.",
    )
    def search_functions_by_name(
        client: BinjaClient, query: str, offset: int = 0, limit: int = 100
    ) -> str:
        return functions.search_functions_by_name(client, query=query, offset=offset, limit=limit)

    @op(
        "decompile_function",
        "Decompile a specific function by name and return the decompiled C code.",
    )
    def decompile_function(client: BinjaClient, name: str) -> str:
        return functions.decompile_function(client, name=name)

    @op("get_il", "Get IL for a function in the selected view (hlil, mlil, llil).")
    def get_il(
        client: BinjaClient, name_or_address: str, view: ILView = "hlil", ssa: bool = False
    ) -> str:
        return functions.get_il(client, name_or_address=name_or_address, view=view, ssa=ssa)

    @op(
        "fetch_disassembly",
        "Retrieve the disassembled code of a function as assembly mnemonic instructions.",
    )
    def fetch_disassembly(client: BinjaClient, name: str) -> str:
        return functions.fetch_disassembly(client, name=name)

    @op("function_at", "Retrieve the name of the function the address belongs to.")
    def function_at(client: BinjaClient, address: str) -> str:
        return functions.function_at(client, address=address)

    @op(
        "get_stack_frame_vars",
        "Get stack frame variable information for a function (names, offsets, sizes, types).",
    )
    def get_stack_frame_vars(client: BinjaClient, function_identifier: str) -> str:
        return functions.get_stack_frame_vars(client, function_identifier=function_identifier)


def _register_renames(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op(
        "rename_function",
        "Rename a function by its current name. The configured prefix will be "
        "automatically prepended if not present.",
    )
    def rename_function(client: BinjaClient, old_name: str, new_name: str) -> str:
        return rename.rename_function(client, old_name=old_name, new_name=new_name)

    @op("rename_single_variable", "Rename a variable in a function.")
    def rename_single_variable(
        client: BinjaClient, function_name: str, variable_name: str, new_name: str
    ) -> str:
        return rename.rename_single_variable(
            client, function_name=function_name, variable_name=variable_name, new_name=new_name
        )

    @op("rename_multi_variables", "Rename multiple local variables in one call.")
    def rename_multi_variables(
        client: BinjaClient,
        function_identifier: str,
        mapping_json: Optional[str] = None,
        pairs: Optional[str] = None,
        renames_json: Optional[str] = None,
    ) -> str:
        return rename.rename_multi_variables(
            client,
            function_identifier=function_identifier,
            mapping_json=mapping_json,
            pairs=pairs,
            renames_json=renames_json,
        )

    @op("rename_data", "Rename a data label at the specified address.")
    def rename_data(client: BinjaClient, address: str, new_name: str) -> str:
        return rename.rename_data(client, address=address, new_name=new_name)


def _register_comments(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("set_comment", "Set a comment at a specific address.")
    def set_comment(client: BinjaClient, address: str, comment: str) -> str:
        return comments.set_comment(client, address=address, comment=comment)

    @op("get_comment", "Get the comment at a specific address.")
    def get_comment(client: BinjaClient, address: str) -> str:
        return comments.get_comment(client, address=address)

    @op("delete_comment", "Delete the comment at a specific address.")
    def delete_comment(client: BinjaClient, address: str) -> str:
        return comments.delete_comment(client, address=address)

    @op("set_function_comment", "Set a comment for a function.")
    def set_function_comment(client: BinjaClient, function_name: str, comment: str) -> str:
        return comments.set_function_comment(client, function_name=function_name, comment=comment)

    @op("get_function_comment", "Get the comment for a function.")
    def get_function_comment(client: BinjaClient, function_name: str) -> str:
        return comments.get_function_comment(client, function_name=function_name)

    @op("delete_function_comment", "Delete the comment for a function.")
    def delete_function_comment(client: BinjaClient, function_name: str) -> str:
        return comments.delete_function_comment(client, function_name=function_name)


def _register_types(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("define_types", "Define types from a C code string.")
    def define_types(client: BinjaClient, c_code: str) -> str:
        return types.define_types(client, c_code=c_code)

    @op("list_local_types", "List all local types in the database (paginated).")
    def list_local_types(
        client: BinjaClient, offset: int = 0, count: int = 200, include_libraries: bool = False
    ) -> str:
        return types.list_local_types(
            client, offset=offset, count=count, include_libraries=include_libraries
        )

    @op(
        "search_types",
        "Search local types whose name or declaration contains the substring.",
    )
    def search_types(
        client: BinjaClient,
        query: str,
        offset: int = 0,
        count: int = 200,
        include_libraries: bool = False,
    ) -> str:
        return types.search_types(
            client, query=query, offset=offset, count=count, include_libraries=include_libraries
        )

    @op(
        "get_user_defined_type",
        "Retrieve definition of a user defined type (struct, enumeration, typedef, union).",
    )
    def get_user_defined_type(client: BinjaClient, type_name: str) -> str:
        return types.get_user_defined_type(client, type_name=type_name)

    @op(
        "get_type_info",
        "Resolve a type name and return its declaration and details "
        "(kind, members, enum values).",
    )
    def get_type_info(client: BinjaClient, type_name: str) -> str:
        return types.get_type_info(client, type_name=type_name)

    @op("declare_c_type", "Create or update a local type from a C declaration.")
    def declare_c_type(client: BinjaClient, c_declaration: str) -> str:
        return types.declare_c_type(client, c_declaration=c_declaration)

    @op("retype_variable", "Retype a variable in a function.")
    def retype_variable(
        client: BinjaClient, function_name: str, variable_name: str, type_str: str
    ) -> str:
        return types.retype_variable(
            client, function_name=function_name, variable_name=variable_name, type_str=type_str
        )

    @op("set_local_variable_type", "Set a local variable's type.")
    def set_local_variable_type(
        client: BinjaClient, function_address: str, variable_name: str, new_type: str
    ) -> str:
        return types.set_local_variable_type(
            client,
            function_address=function_address,
            variable_name=variable_name,
            new_type=new_type,
        )


def _register_data(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("list_data_items", "List defined data labels and their values with pagination.")
    def list_data_items(client: BinjaClient, offset: int = 0, limit: int = 100) -> str:
        return data.list_data_items(client, offset=offset, limit=limit)

    @op("hexdump_address", "Hexdump data starting at an address.")
    def hexdump_address(client: BinjaClient, address: str, length: int = -1) -> str:
        return data.hexdump_address(client, address=address, length=length)

    @op("hexdump_data", "Hexdump a data symbol by name or address.")
    def hexdump_data(client: BinjaClient, name_or_address: str, length: int = -1) -> str:
        return data.hexdump_data(client, name_or_address=name_or_address, length=length)

    @op("get_data_decl", "Return a declaration-like string and hexdump for a data symbol.")
    def get_data_decl(client: BinjaClient, name_or_address: str, length: int = -1) -> str:
        return data.get_data_decl(client, name_or_address=name_or_address, length=length)


def _register_xrefs(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("get_xrefs_to", "Get all cross references (code and data) to the given address.")
    def get_xrefs_to(client: BinjaClient, address: str) -> str:
        return xrefs.get_xrefs_to(client, address=address)

    @op("get_xrefs_to_field", "Get all cross references to a named struct field (member).")
    def get_xrefs_to_field(client: BinjaClient, struct_name: str, field_name: str) -> str:
        return xrefs.get_xrefs_to_field(client, struct_name=struct_name, field_name=field_name)

    @op("get_xrefs_to_struct", "Get cross references/usages related to a struct name.")
    def get_xrefs_to_struct(client: BinjaClient, struct_name: str) -> str:
        return xrefs.get_xrefs_to_struct(client, struct_name=struct_name)

    @op("get_xrefs_to_type", "Get xrefs/usages related to a struct or type name.")
    def get_xrefs_to_type(client: BinjaClient, type_name: str) -> str:
        return xrefs.get_xrefs_to_type(client, type_name=type_name)

    @op(
        "get_xrefs_to_enum",
        "Get usages/xrefs of an enum by scanning for member values and matches.",
    )
    def get_xrefs_to_enum(client: BinjaClient, enum_name: str) -> str:
        return xrefs.get_xrefs_to_enum(client, enum_name=enum_name)

    @op("get_xrefs_to_union", "Get cross references/usages related to a union type by name.")
    def get_xrefs_to_union(client: BinjaClient, union_name: str) -> str:
        return xrefs.get_xrefs_to_union(client, union_name=union_name)


def _register_listings(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("list_classes", "List all namespace/class names in the program with pagination.")
    def list_classes(client: BinjaClient, offset: int = 0, limit: int = 100) -> str:
        return listing.list_classes(client, offset=offset, limit=limit)

    @op("list_namespaces", "List all non-global namespaces in the program with pagination.")
    def list_namespaces(client: BinjaClient, offset: int = 0, limit: int = 100) -> str:
        return listing.list_namespaces(client, offset=offset, limit=limit)

    @op("list_segments", "List all memory segments in the program with pagination.")
    def list_segments(client: BinjaClient, offset: int = 0, limit: int = 100) -> str:
        return listing.list_segments(client, offset=offset, limit=limit)

    @op("list_sections", "List sections in the program with pagination.")
    def list_sections(client: BinjaClient, offset: int = 0, limit: int = 100) -> str:
        return listing.list_sections(client, offset=offset, limit=limit)

    @op("list_imports", "List imported symbols in the program with pagination.")
    def list_imports(client: BinjaClient, offset: int = 0, limit: int = 100) -> str:
        return listing.list_imports(client, offset=offset, limit=limit)

    @op("list_exports", "List exported functions/symbols with pagination.")
    def list_exports(client: BinjaClient, offset: int = 0, limit: int = 100) -> str:
        return listing.list_exports(client, offset=offset, limit=limit)


def _register_strings(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("list_strings", "List all strings in the database (paginated).")
    def list_strings(client: BinjaClient, offset: int = 0, count: int = 100) -> str:
        return strings.list_strings(client, offset=offset, count=count)

    @op("list_strings_filter", "List matching strings in the database (paginated, filtered).")
    def list_strings_filter(
        client: BinjaClient, offset: int = 0, count: int = 100, filter: str = ""
    ) -> str:
        return strings.list_strings_filter(client, offset=offset, count=count, filter=filter)

    @op("list_all_strings", "List all strings in the database (aggregated across pages).")
    def list_all_strings(client: BinjaClient, batch_size: int = 500) -> str:
        return strings.list_all_strings(client, batch_size=batch_size)


def _register_binaries(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("get_binary_status", "Get the current status of the loaded binary.")
    def get_binary_status(client: BinjaClient) -> str:
        return binaries.get_binary_status(client)

    @op(
        "list_binaries",
        "List managed/open binaries known to the server with ids and active flag.",
    )
    def list_binaries(client: BinjaClient) -> str:
        return binaries.list_binaries(client)

    @op(
        "select_binary",
        "Select which binary to analyze by ordinal, internal view id, full path, or basename.",
    )
    def select_binary(client: BinjaClient, view: str) -> str:
        return binaries.select_binary(client, view=view)


def _register_modifications(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("set_function_prototype", "Set a function's prototype by name or address.")
    def set_function_prototype(client: BinjaClient, name_or_address: str, prototype: str) -> str:
        return modify.set_function_prototype(
            client, name_or_address=name_or_address, prototype=prototype
        )

    @op("make_function_at", "Create a function at the given address.")
    def make_function_at(client: BinjaClient, address: str, platform: Optional[str] = None) -> str:
        return modify.make_function_at(client, address=address, platform=platform)

    @op("list_platforms", "List all available platform names from Binary Ninja.")
    def list_platforms(client: BinjaClient) -> str:
        return modify.list_platforms(client)

    @op("patch_bytes", "Patch bytes at a given address in the binary.")
    def patch_bytes(
        client: BinjaClient, address: str, data: str, save_to_file: bool = True
    ) -> str:
        return modify.patch_bytes(client, address=address, data=data, save_to_file=save_to_file)


def _register_values(op: Callable[[str, str], Callable[[Handler], Handler]]) -> None:
    @op("format_value", "Convert and annotate a value at an address in Binary Ninja.")
    def format_value(client: BinjaClient, address: str, text: str, size: int = 0) -> str:
        return values.format_value(client, address=address, text=text, size=size)

    @op(
        "convert_number",
        "Convert a number or string to multiple representations (hex/dec/bin, C literals).",
    )
    def convert_number(client: BinjaClient, text: str, size: int = 0) -> str:
        return values.convert_number(client, text=text, size=size)


_SECTIONS = (
    _register_functions,
    _register_renames,
    _register_comments,
    _register_types,
    _register_data,
    _register_xrefs,
    _register_listings,
    _register_strings,
    _register_binaries,
    _register_modifications,
    _register_values,
)


@lru_cache(maxsize=1)
def build_registry() -> OperationRegistry:
    """Return the process-wide registry holding every operation, frozen."""

    registry = OperationRegistry()
    for section in _SECTIONS:
        section(registry.operation)
    return registry.freeze()


def _dispatching(definition: OperationDefinition, logger: logging.Logger) -> Handler:
    handler = definition.handler
    name = definition.name

    @wraps(handler)
    def run(client: BinjaClient, *args: Any, **kwargs: Any) -> str:
        with request_scope(name, logger=logger, extra={"tool": name}):
            try:
                result = handler(client, *args, **kwargs)
            except InvalidArgument as exc:
                increment_counter("tool.invalid_argument")
                return render_error(str(exc), kind=ErrorKind.INVALID_ARGUMENT)
            except Exception as exc:
                logger.exception("tool.failed", extra={"tool": name})
                return render_error(f"internal error in {name}: {exc}", kind=ErrorKind.INTERNAL)
            if is_error_text(result):
                increment_counter("tool.error_payloads")
            return result

    return run


def register_tools(
    server: Any,
    *,
    client_factory: Callable[[], BinjaClient],
    registry: Optional[OperationRegistry] = None,
) -> OperationRegistry:
    """Bind every operation of *registry* onto *server* as an MCP tool."""

    registry = registry if registry is not None else build_registry()
    tool_client = inject_client(client_factory)
    logger = logging.getLogger("binja.bridge.mcp.tools")

    for definition in registry:
        server.tool(name=definition.name, description=definition.description)(
            tool_client(_dispatching(definition, logger))
        )
    return registry


__all__ = ["ILView", "build_registry", "register_tools"]
