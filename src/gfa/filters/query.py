"""
Fluent builder for Gmail's ``q`` search string.

The builder accumulates filters through chained calls and renders them into
the search grammar documented at https://support.google.com/mail/answer/7190,
together with the other parameters accepted by the list endpoints
(``maxResults``, ``pageToken``, ``includeSpamTrash``).
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, field_validator

from gfa.utils.dates import DateLike, to_timestamp

# Configure logger
logger = logging.getLogger(__name__)

FilterValue = Union[str, int, Sequence[Union[str, int]]]


class Combinator(str, Enum):
    """Boolean operator placed between the values of one filter token."""
    AND = "AND"
    OR = "OR"

    @classmethod
    def coerce(cls, value: Union["Combinator", str, None]) -> "Combinator":
        """Accept enum members, "and"/"or" in any case, or None (OR)."""
        if value is None:
            return cls.OR
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Invalid combinator {value!r}, expected AND or OR")


class FilterField(str, Enum):
    """
    Search fields that can carry one or more values.

    Member order is the order fields are rendered in; values are the field
    names used in the Gmail search grammar.
    """
    FROM = "from"
    TO = "to"
    CC = "cc"
    BCC = "bcc"
    RECIPIENT = "list"
    SUBJECT = "subject"
    LABEL = "label"
    CATEGORY = "category"
    HAS = "has"
    IS = "is"
    IN = "in"
    FILENAME = "filename"
    SIZE = "size"
    SMALLER = "smaller"
    LARGER = "larger"
    OLDER = "older_than"
    NEWER = "newer_than"


# Gmail only honours one value for these; setting them again replaces.
SINGLE_VALUE_FIELDS = frozenset({
    FilterField.SUBJECT,
    FilterField.SIZE,
    FilterField.SMALLER,
    FilterField.LARGER,
    FilterField.OLDER,
    FilterField.NEWER,
})


class QueryToken(BaseModel):
    """One group of values for a field, joined by a single combinator."""
    values: List[str]
    combinator: Combinator = Combinator.OR

    @field_validator("values", mode="before")
    @classmethod
    def wrap_values(cls, v):
        if isinstance(v, (str, int)):
            return [str(v)]
        return [str(item) for item in v]

    @field_validator("values")
    @classmethod
    def check_not_empty(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("A query token needs at least one value")
        return v

    @field_validator("combinator", mode="before")
    @classmethod
    def coerce_combinator(cls, v):
        return Combinator.coerce(v)

    @classmethod
    def of(
        cls, value_or_values: FilterValue, combinator: Union[Combinator, str, None] = None
    ) -> "QueryToken":
        """Build a token from a single value or a sequence of values."""
        return cls(values=value_or_values, combinator=combinator)

    def render(self, field: FilterField) -> str:
        """Render as ``field:v1 COMB field:v2 ...`` with no trailing operator."""
        separator = f" {self.combinator.value} "
        return separator.join(f"{field.value}:{value}" for value in self.values)


class GmailFilter:
    """
    Accumulates search filters and renders them into list request params.

    Every setter returns ``self`` so calls can be chained::

        GmailFilter().from_("me").label(["work", "urgent"], "AND").after("2024-01-01")

    A raw query set through :meth:`raw_query` takes precedence over every
    structured filter.
    """

    default_max_results = 20

    def __init__(self):
        self._raw_query: Optional[str] = None
        self._tokens: Dict[FilterField, List[QueryToken]] = {}
        self._before: Optional[int] = None
        self._after: Optional[int] = None
        self._match_exact: Optional[str] = None
        # include_word and exclude_word write the same slot; last call wins
        self._word: Optional[str] = None
        self._include_spam_trash = False
        self._max_results = self.default_max_results

    @property
    def per_page(self) -> int:
        """Number of results requested per page."""
        return self._max_results

    def tokens(self, field: FilterField) -> Tuple[QueryToken, ...]:
        """Tokens accumulated so far for ``field``, in insertion order."""
        return tuple(self._tokens.get(field, ()))

    def set_filter_param(
        self,
        field: FilterField,
        value: FilterValue,
        combinator: Union[Combinator, str, None] = None,
    ) -> "GmailFilter":
        """
        Add a token for a search field.

        Args:
            field: Field to filter on
            value: One value or a sequence of values
            combinator: AND or OR between the values (default OR)

        Returns:
            self
        """
        field = FilterField(field)
        token = QueryToken.of(value, combinator)
        if field in SINGLE_VALUE_FIELDS:
            self._tokens[field] = [token]
        else:
            self._tokens.setdefault(field, []).append(token)
        return self

    def include_spam_trash(self, include: bool = True) -> "GmailFilter":
        """Include messages from SPAM and TRASH in the results."""
        self._include_spam_trash = bool(include)
        return self

    def max_results(self, per_page: Union[int, str, None]) -> "GmailFilter":
        """Set the page size; falsy or non-positive values are ignored."""
        if per_page and int(per_page) > 0:
            self._max_results = int(per_page)
        return self

    def from_(self, email_or_emails: FilterValue, combinator=None) -> "GmailFilter":
        """Filter by sender. ``me`` stands for the authenticated user."""
        return self.set_filter_param(FilterField.FROM, email_or_emails, combinator)

    def to(self, email_or_emails: FilterValue, combinator=None) -> "GmailFilter":
        return self.set_filter_param(FilterField.TO, email_or_emails, combinator)

    def cc(self, email_or_emails: FilterValue, combinator=None) -> "GmailFilter":
        return self.set_filter_param(FilterField.CC, email_or_emails, combinator)

    def bcc(self, email_or_emails: FilterValue, combinator=None) -> "GmailFilter":
        return self.set_filter_param(FilterField.BCC, email_or_emails, combinator)

    def recipient(self, email_or_emails: FilterValue, combinator=None) -> "GmailFilter":
        """Filter by mailing list address (the ``list:`` operator)."""
        return self.set_filter_param(FilterField.RECIPIENT, email_or_emails, combinator)

    def subject(self, subject: str) -> "GmailFilter":
        """Filter by subject. Only the last call is kept."""
        return self.set_filter_param(FilterField.SUBJECT, subject)

    def label(self, label_or_labels: FilterValue, combinator=None) -> "GmailFilter":
        return self.set_filter_param(FilterField.LABEL, label_or_labels, combinator)

    def category(self, category_or_categories: FilterValue, combinator=None) -> "GmailFilter":
        """
        Filter by inbox category: primary, social, promotions, updates,
        forums, reservations or purchases.
        """
        return self.set_filter_param(FilterField.CATEGORY, category_or_categories, combinator)

    def has(self, has: FilterValue, combinator=None) -> "GmailFilter":
        return self.set_filter_param(FilterField.HAS, has, combinator)

    def is_(self, is_: FilterValue, combinator=None) -> "GmailFilter":
        return self.set_filter_param(FilterField.IS, is_, combinator)

    def in_(self, in_: FilterValue, combinator=None) -> "GmailFilter":
        return self.set_filter_param(FilterField.IN, in_, combinator)

    def filename(self, filename_or_filenames: FilterValue, combinator=None) -> "GmailFilter":
        return self.set_filter_param(FilterField.FILENAME, filename_or_filenames, combinator)

    def size(self, size: Union[int, str]) -> "GmailFilter":
        return self.set_filter_param(FilterField.SIZE, size)

    def smaller_than(self, email_size: Union[int, str]) -> "GmailFilter":
        return self.set_filter_param(FilterField.SMALLER, email_size)

    def larger_than(self, email_size: Union[int, str]) -> "GmailFilter":
        return self.set_filter_param(FilterField.LARGER, email_size)

    def older_than(self, date_difference: str) -> "GmailFilter":
        """Relative age filter, e.g. ``2d``, ``3m`` or ``1y``."""
        return self.set_filter_param(FilterField.OLDER, date_difference)

    def newer_than(self, date_difference: str) -> "GmailFilter":
        return self.set_filter_param(FilterField.NEWER, date_difference)

    def before(self, value: DateLike) -> "GmailFilter":
        """
        Only messages received before ``value``.

        Raises:
            DateParseError: If ``value`` cannot be parsed
        """
        self._before = to_timestamp(value)
        return self

    def after(self, value: DateLike) -> "GmailFilter":
        """
        Only messages received after ``value``.

        Raises:
            DateParseError: If ``value`` cannot be parsed
        """
        self._after = to_timestamp(value)
        return self

    def match_exact(self, word_or_phrase: str) -> "GmailFilter":
        """Match a word or phrase exactly. The phrase is quoted as given."""
        self._match_exact = f'"{word_or_phrase}"'
        return self

    def search(self, word_or_phrase: str) -> "GmailFilter":
        """Alias for :meth:`match_exact`."""
        return self.match_exact(word_or_phrase)

    def include_word(self, word: str) -> "GmailFilter":
        """Require ``word``. Shares its slot with :meth:`exclude_word`."""
        self._word = f"+{word}"
        return self

    def exclude_word(self, word: str) -> "GmailFilter":
        """Exclude ``word``. Shares its slot with :meth:`include_word`."""
        self._word = f"-{word}"
        return self

    def raw_query(self, q: str) -> "GmailFilter":
        """Use ``q`` verbatim; every structured filter is then ignored."""
        self._raw_query = q
        return self

    def render_query(self) -> str:
        """
        Render the filters into a Gmail ``q`` string.

        Returns:
            The raw query if one was set, otherwise the structured filters
            joined by single spaces (empty string when nothing is set)
        """
        if self._raw_query:
            return self._raw_query

        segments = []
        for field in FilterField:
            for token in self._tokens.get(field, ()):
                segments.append(token.render(field))

        # An epoch of 0 is treated as unset
        if self._before:
            segments.append(f"before:{self._before}")
        if self._after:
            segments.append(f"after:{self._after}")
        if self._match_exact:
            segments.append(self._match_exact)
        if self._word:
            segments.append(self._word)

        return " ".join(segments)

    def to_request_params(self, page_token: Optional[str] = None) -> Dict[str, Any]:
        """
        Build the keyword arguments for a messages/threads/drafts list call.

        Keys whose value would be empty or false are left out.
        """
        params: Dict[str, Any] = {}
        if self._include_spam_trash:
            params["includeSpamTrash"] = True
        if page_token:
            params["pageToken"] = page_token
        if self._max_results:
            params["maxResults"] = str(self._max_results)

        q = self.render_query()
        if q:
            params["q"] = q

        return params
