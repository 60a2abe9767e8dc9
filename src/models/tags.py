"""
Directive taxonomy models

Static classification of Smarty directive names into the categories the
formatter cares about: block structure (start / middle / end), attribute
wrapping and boolean-expression splitting.
"""

from enum import Enum
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config.settings import AppSettings


class TagCategory(Enum):
    """
    Categories a directive name can belong to

    A name may sit in several categories at once (``if`` is both a block
    start and a logic-expression directive).
    """
    START = "start"        # {foreach ...}, {if ...}
    MIDDLE = "middle"      # {else}, {foreachelse}
    END = "end"            # {/foreach}, {/if}
    WRAP = "wrap"          # {include ...}, {assign ...}
    LOGIC = "logic"        # {if ...}, {while ...}
    LITERAL = "literal"    # {literal}...{/literal}


BLOCK_TAGS: FrozenSet[str] = frozenset({
    "block", "capture", "for", "foreach", "function", "if",
    "literal", "section", "setfilter", "strip", "while",
})

MIDDLE_TAGS: FrozenSet[str] = frozenset({"else", "elseif", "foreachelse", "sectionelse"})

WRAP_TAGS: FrozenSet[str] = frozenset({"component", "include", "include_scoped", "assign"})

LOGIC_TAGS: FrozenSet[str] = frozenset({"if", "elseif", "while"})


@dataclass(frozen=True)
class TagTaxonomy:
    """
    Immutable set of directive name categories

    Attributes:
        start: Names that open a nested block ({if}, {foreach}, ...)
        middle: Else-like names that split a block ({else}, {elseif}, ...)
        end: Names whose closing form ends a block ({/if}, {/foreach}, ...)
        wrap: Attribute-heavy names eligible for one-attribute-per-line output
        logic: Names whose content is a boolean expression
        literal: Name of the verbatim directive pair

    Example:
        >>> taxonomy = TagTaxonomy()
        >>> sorted(c.value for c in taxonomy.categories_get("if"))
        ['end', 'logic', 'start']
    """
    start: FrozenSet[str] = field(default=BLOCK_TAGS)
    middle: FrozenSet[str] = field(default=MIDDLE_TAGS)
    end: FrozenSet[str] = field(default=BLOCK_TAGS)
    wrap: FrozenSet[str] = field(default=WRAP_TAGS)
    logic: FrozenSet[str] = field(default=LOGIC_TAGS)
    literal: str = "literal"

    def categories_get(self, name: str) -> Set[TagCategory]:
        """Return every category the directive name belongs to"""
        categories: Set[TagCategory] = set()
        if name in self.start:
            categories.add(TagCategory.START)
        if name in self.middle:
            categories.add(TagCategory.MIDDLE)
        if name in self.end:
            categories.add(TagCategory.END)
        if name in self.wrap:
            categories.add(TagCategory.WRAP)
        if name in self.logic:
            categories.add(TagCategory.LOGIC)
        if name == self.literal:
            categories.add(TagCategory.LITERAL)
        return categories

    def block_is(self, name: str) -> bool:
        """Check if a directive name takes part in block nesting (start or end)"""
        return name in self.start or name in self.end

    def taxonomy_extend(
        self,
        start: Iterable[str] = (),
        middle: Iterable[str] = (),
        end: Iterable[str] = (),
        wrap: Iterable[str] = (),
        logic: Iterable[str] = (),
    ) -> "TagTaxonomy":
        """
        Return a new taxonomy with additional names merged in

        The receiver is left untouched.
        """
        return replace(
            self,
            start=self.start | frozenset(start),
            middle=self.middle | frozenset(middle),
            end=self.end | frozenset(end),
            wrap=self.wrap | frozenset(wrap),
            logic=self.logic | frozenset(logic),
        )

    @classmethod
    def fromSettings(cls, settings: "AppSettings") -> "TagTaxonomy":
        """Build the default taxonomy extended with the extra_*_tags settings"""
        return cls().taxonomy_extend(
            start=settings.extra_start_tags,
            middle=settings.extra_middle_tags,
            end=settings.extra_end_tags,
            wrap=settings.extra_wrap_tags,
            logic=settings.extra_logic_tags,
        )
