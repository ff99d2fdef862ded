"""
AST Visitor

Rust Pattern: rustc_middle::ty::TypeVisitor

Every interpreter over a schema (the decoder and the encoder)
implements this interface. Dispatch happens in AST.accept on the node
kind; visitors never branch on isinstance.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .nodes import (
    AST,
    Enums,
    Keyword,
    Lazy,
    Literal,
    Refinement,
    TemplateLiteral,
    Transform,
    TupleType,
    TypeAlias,
    TypeLiteral,
    Union,
    UniqueSymbol,
)

T = TypeVar('T')


class ASTVisitor(ABC, Generic[T]):
    """
    Schema visitor (one method per variant; keywords share visit_keyword).

    Usage:
        class Describe(ASTVisitor[str]):
            def visit_keyword(self, node) -> str:
                return node.kind.value
            ...

        text = schema.accept(Describe())
    """

    def visit(self, node: AST) -> T:
        return node.accept(self)

    @abstractmethod
    def visit_type_alias(self, node: TypeAlias) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_literal(self, node: Literal) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_unique_symbol(self, node: UniqueSymbol) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_keyword(self, node: Keyword) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_enums(self, node: Enums) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_template_literal(self, node: TemplateLiteral) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_tuple(self, node: TupleType) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_type_literal(self, node: TypeLiteral) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_union(self, node: Union) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_lazy(self, node: Lazy) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_refinement(self, node: Refinement) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_transform(self, node: Transform) -> T:
        raise NotImplementedError
