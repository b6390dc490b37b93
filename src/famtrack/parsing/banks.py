"""Per-bank extraction rulesets.

Each ruleset knows how one issuer lays out its statements: which regexes
find transaction lines, which descriptions are headers or totals, and which
words flip a line to income. ``RULESETS`` holds one instance per issuer in
the detector's precedence order; ``select_ruleset`` returns the first whose
``detect`` matches. ``GENERIC`` handles unknown issuers and complements sparse
results.
"""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from famtrack.domain.entities import (
    CREDIT_CARD,
    EXPENSE,
    INCOME,
    MODE_INSTALLMENT,
    MODE_SINGLE,
    ParsedTransaction,
)
from famtrack.utils.amount_parser import parse_amount
from famtrack.utils.date_parser import (
    parse_abbreviated_date,
    parse_long_date,
    parse_statement_date,
)
from famtrack.parsing.detector import BANK_PATTERNS
from famtrack.utils.text import collapse_whitespace, strip_accents

logger = structlog.get_logger(__name__)

ISSUER_PATTERNS = dict(BANK_PATTERNS)

AMOUNT = r"\d{1,3}(?:\.\d{3})*,\d{2}"
DAY_MONTH = r"\d{2}/\d{2}"
DAY_MONTH_YEAR = r"\d{2}/\d{2}(?:/\d{4})?"
MONTH_ABBR = r"jan|fev|mar|abr|mai|jun|jul|ago|set|out|nov|dez"
MONTH_NAME = (
    r"janeiro|fevereiro|março|marco|abril|maio|junho|julho|agosto|"
    r"setembro|outubro|novembro|dezembro"
)
QUOTE = "\"“”"
UPPER = "A-ZÁÂÃÀÇÉÊÍÓÔÕÚÜ"

INSTALLMENT_SUFFIX = re.compile(r"(\d{1,2})/(\d{1,2})\s*$")
TWO_DIGIT_INSTALLMENT_SUFFIX = re.compile(r"(\d{2})/(\d{2})\s*$")

# Line shapes shared by several issuers
CARD_LINE = re.compile(rf"(?P<date>{DAY_MONTH})\s+(?P<desc>.+?)\s+(?P<amount>{AMOUNT})")
CARD_LINE_CURRENCY = re.compile(
    rf"(?P<date>{DAY_MONTH})\s+(?P<desc>.+?)\s+R?\$?\s*(?P<amount>{AMOUNT})"
)
ABBREVIATED_LINE = re.compile(
    rf"(?P<day>\d{{1,2}})\s+(?P<mon>{MONTH_ABBR})\s+(?P<desc>.+?)\s+R?\$?\s*(?P<amount>{AMOUNT})",
    re.I,
)
SIGNED_LINE = re.compile(
    rf"(?P<date>{DAY_MONTH_YEAR})\s+(?P<desc>.+?)\s+(?P<amount>[+-]?\s*{AMOUNT})"
)
SIGNED_CURRENCY_LINE = re.compile(
    rf"(?P<date>{DAY_MONTH_YEAR})\s+(?P<desc>.+?)\s+(?P<amount>[+-]?\s*R?\$?\s*{AMOUNT})"
)
CREDIT_DEBIT_LINE = re.compile(
    rf"(?P<date>{DAY_MONTH_YEAR})\s+(?P<desc>.+?)\s+(?P<amount>[+-]?\s*{AMOUNT})"
    r"(?:[ \t]+(?P<cd>[CD])\b)?"
)
CURRENCY_SIGN_LINE = re.compile(
    rf"(?P<date>{DAY_MONTH_YEAR})\s+(?P<desc>.+?)\s+R?\$?\s*(?P<amount>[+-]?{AMOUNT})"
)

LONG_DATE = re.compile(rf"(\d{{1,2}})\s+de\s+({MONTH_NAME})\s+de\s+(\d{{4}})", re.I)

NON_TRANSACTION = [
    re.compile(pattern, re.I)
    for pattern in (
        r"^saldo\s+(do\s+dia|disponível|bloqueado|anterior|total)",
        r"^(fale\s+com|sac:|ouvidoria:|deficiência)",
        r"^(data|valor|descrição|histórico|lançamento)$",
        r"^total\s+(da\s+fatura|para|geral)",
        r"^(período|agência|conta(\s+corrente)?|cpf|cnpj)\s*[:\d]",
    )
]


@dataclass(frozen=True)
class SectionRule:
    """A phrase found inside a long-date section and the direction it implies."""

    pattern: re.Pattern
    direction: str

    def type_for(self, matched: str, description: str) -> str:
        if self.direction == "pix":
            if re.search(r"recebido\s+devolvido", matched, re.I):
                return EXPENSE
            return INCOME if re.search(r"recebido", matched, re.I) else EXPENSE
        if self.direction == "received":
            return INCOME if re.search(r"recebid", matched, re.I) else EXPENSE
        if self.direction == "keywords":
            return INCOME if _looks_like_income(description) else EXPENSE
        return self.direction


def _section_pattern(prefix: str, amount: str = r"-?R\$\s*[\d.,]+") -> re.Pattern:
    return re.compile(
        rf"{prefix}[:\s]+[{QUOTE}]?([^{QUOTE}\n]+?)[{QUOTE}]?\s+({amount})", re.I
    )


PIX_RULE = SectionRule(
    re.compile(
        rf"Pix\s+(?:recebido|enviado)(?:\s+devolvido)?[:\s]+[{QUOTE}]([^{QUOTE}\n]+)"
        rf"[{QUOTE}]?\s+(-?R\$\s*[\d.,]+)",
        re.I,
    ),
    "pix",
)
PAYMENT_RULE = SectionRule(
    _section_pattern(
        r"Pagamento\s+(?:efetuado|de\s+(?:Convenio|Convênio|Titulo|Título)(?:\s+-\s+\w+)?"
        r"|Darf\s+Numerado|Simples\s+Nacional)",
        r"-R\$\s*[\d.,]+",
    ),
    EXPENSE,
)

SECTION_RULES = [
    PIX_RULE,
    SectionRule(_section_pattern(r"(?:TED|DOC)\s+(?:recebid[ao]|enviad[ao])"), "received"),
    SectionRule(_section_pattern(r"Transfer[êe]ncia\s+(?:recebida|enviada)"), "received"),
    PAYMENT_RULE,
    SectionRule(_section_pattern(r"Dep[óo]sito", r"R\$\s*[\d.,]+"), INCOME),
    SectionRule(_section_pattern(r"Saque", r"-R\$\s*[\d.,]+"), EXPENSE),
    SectionRule(
        re.compile(
            rf"(?:Tarifa|Taxa)(?:\s+banc[áa]ria|\s+de\s+\w+)?[:\s]*[{QUOTE}]?"
            rf"([^{QUOTE}\n]+?)[{QUOTE}]?\s+(-R\$\s*[\d.,]+)",
            re.I,
        ),
        EXPENSE,
    ),
    SectionRule(_section_pattern(r"Boleto(?:\s+pago)?", r"-R\$\s*[\d.,]+"), EXPENSE),
    SectionRule(
        re.compile(
            rf"(?:Rendimento|Juros|Dividendos)[:\s]+[{QUOTE}]?([^{QUOTE}\n]*?)[{QUOTE}]?"
            r"\s+(R\$\s*[\d.,]+)",
            re.I,
        ),
        INCOME,
    ),
    SectionRule(
        re.compile(
            r"([A-Za-zÀ-ÿ \t]{3,50}?)\s+(-R\$\s*[\d.,]+)(?:\s+-?R\$\s*[\d.,]+)?[ \t]*$",
            re.M,
        ),
        EXPENSE,
    ),
    SectionRule(
        re.compile(
            r"([A-Za-zÀ-ÿ \t]{3,50}?)\s+(R\$\s*[\d.,]+)(?:\s+R\$\s*[\d.,]+)?[ \t]*$",
            re.M,
        ),
        "keywords",
    ),
]

INCOME_WORDS = re.compile(
    r"recebid[oa]|crédito|credito|depósito|deposito|rendimento|juros|dividendo|"
    r"salário|salario|reembolso|estorno|devolução|devolvido|cashback",
    re.I,
)


def _looks_like_income(description: str) -> bool:
    return bool(INCOME_WORDS.search(description))


def _is_non_transaction(description: str) -> bool:
    return any(pattern.search(description) for pattern in NON_TRANSACTION)


def _clean_section_description(raw: str) -> str:
    clean = raw.strip()
    clean = re.sub(r"^Cp\s*:\s*\d+-", "", clean, flags=re.I).strip()
    clean = re.sub(r"^\d+\s+\d+\s+", "", clean).strip()
    clean = clean.strip(QUOTE).strip()
    return collapse_whitespace(clean)


def parse_long_date_sections(
    text: str, rules: list[SectionRule] = SECTION_RULES
) -> list[ParsedTransaction]:
    """Extract transactions from statements grouped under long-form dates.

    The text is split at every "4 de Janeiro de 2025" header and each section
    is scanned with ``rules``; the header's date applies to every match in it.
    """
    headers = []
    for match in LONG_DATE.finditer(text):
        try:
            headers.append((match.start(), parse_long_date(*match.groups())))
        except ValueError:
            logger.debug("long_date_skipped", header=match.group(0))
    if not headers:
        return []

    transactions: list[ParsedTransaction] = []
    seen: set[tuple] = set()
    for index, (start, section_date) in enumerate(headers):
        end = headers[index + 1][0] if index + 1 < len(headers) else len(text)
        section = text[start:end]
        for rule in rules:
            for match in rule.pattern.finditer(section):
                description = _clean_section_description(match.group(1))
                if len(description) < 2:
                    continue
                try:
                    amount = abs(parse_amount(match.group(2).rstrip(".,")))
                except ValueError:
                    continue
                if amount == 0:
                    continue
                key = (section_date, description[:30], amount)
                if key in seen:
                    continue
                seen.add(key)
                if _is_non_transaction(description):
                    continue
                transactions.append(
                    ParsedTransaction(
                        date=section_date,
                        description=description,
                        amount=amount,
                        type=rule.type_for(match.group(0), description),
                        mode=MODE_SINGLE,
                    )
                )
    return transactions


class BankRuleset:
    """Regex ruleset for one issuer.

    Subclasses declare their line patterns and keyword filters as class
    attributes; ``extract`` runs them over the whole text. Patterns use named
    groups: ``date`` (or ``day`` + ``mon``), ``desc``, ``amount`` and an
    optional ``cd`` credit/debit marker.
    """

    bank = "Desconhecido"

    card_patterns: tuple[re.Pattern, ...] = (CARD_LINE,)
    checking_patterns: tuple[re.Pattern, ...] = (SIGNED_LINE,)
    card_skip: Optional[re.Pattern] = None
    checking_skip: Optional[re.Pattern] = None
    card_income: Optional[re.Pattern] = None
    checking_income: Optional[re.Pattern] = None
    installment_pattern: re.Pattern = INSTALLMENT_SUFFIX
    # Issuers that only produce account statements
    checking_only = False

    def detect(self, text: str) -> bool:
        pattern = ISSUER_PATTERNS.get(self.bank)
        return pattern is not None and bool(pattern.search(strip_accents(text)))

    def extract(
        self,
        text: str,
        statement_type: str,
        reference_date: Optional[date] = None,
    ) -> list[ParsedTransaction]:
        is_card = statement_type == CREDIT_CARD and not self.checking_only
        patterns = self.card_patterns if is_card else self.checking_patterns
        transactions = self.scan(text, patterns, is_card, reference_date)
        logger.debug("ruleset_extracted", bank=self.bank, count=len(transactions))
        return transactions

    def scan(
        self,
        text: str,
        patterns: tuple[re.Pattern, ...],
        is_card: bool,
        reference_date: Optional[date],
        card_last_digits: Optional[str] = None,
        card_holder_name: Optional[str] = None,
    ) -> list[ParsedTransaction]:
        skip = self.card_skip if is_card else self.checking_skip
        transactions: list[ParsedTransaction] = []
        seen: set[tuple] = set()

        for pattern in patterns:
            for match in pattern.finditer(text):
                fields = match.groupdict()
                date_token = fields.get("date") or f"{fields['day']} {fields['mon']}"
                raw_description = fields["desc"]
                amount_token = fields["amount"]

                key = (date_token, raw_description[:30], amount_token)
                if key in seen:
                    continue
                seen.add(key)

                if skip is not None and skip.search(raw_description):
                    continue
                description = collapse_whitespace(raw_description)
                if len(description) < 3 or _is_non_transaction(description):
                    continue

                try:
                    if fields.get("date"):
                        txn_date = parse_statement_date(date_token, reference_date)
                    else:
                        txn_date = parse_abbreviated_date(
                            fields["day"], fields["mon"], reference_date
                        )
                    amount = parse_amount(amount_token)
                except ValueError as e:
                    logger.debug("line_skipped", line=match.group(0), reason=str(e))
                    continue

                transactions.append(
                    self.build(
                        txn_date,
                        description,
                        amount,
                        amount_token,
                        fields.get("cd"),
                        is_card,
                        card_last_digits,
                        card_holder_name,
                    )
                )
        return transactions

    def build(
        self,
        txn_date: date,
        description: str,
        amount: Decimal,
        amount_token: str,
        credit_debit: Optional[str],
        is_card: bool,
        card_last_digits: Optional[str] = None,
        card_holder_name: Optional[str] = None,
    ) -> ParsedTransaction:
        mode = MODE_SINGLE
        installment_number = installments_total = None
        if is_card:
            txn_type = self._card_type(description, amount)
            installment = self.installment_pattern.search(description)
            if installment:
                number, total = int(installment.group(1)), int(installment.group(2))
                if 1 <= number <= total and total > 1:
                    mode = MODE_INSTALLMENT
                    installment_number, installments_total = number, total
        else:
            txn_type = self._checking_type(description, amount, amount_token, credit_debit)

        return ParsedTransaction(
            date=txn_date,
            description=description,
            amount=abs(amount),
            type=txn_type,
            mode=mode,
            installment_number=installment_number,
            installments_total=installments_total,
            card_last_digits=card_last_digits,
            card_holder_name=card_holder_name,
        )

    def _card_type(self, description: str, amount: Decimal) -> str:
        if amount < 0:
            return INCOME
        if self.card_income is not None and self.card_income.search(description):
            return INCOME
        return EXPENSE

    def _checking_type(
        self,
        description: str,
        amount: Decimal,
        amount_token: str,
        credit_debit: Optional[str],
    ) -> Optional[str]:
        """Direction from sign, C/D marker or keywords; None when nothing says."""
        if credit_debit == "C" or "+" in amount_token:
            return INCOME
        if credit_debit == "D" or amount < 0:
            return EXPENSE
        if self.checking_income is not None and self.checking_income.search(description):
            return INCOME
        return None


class NubankRuleset(BankRuleset):
    bank = "Nubank"
    card_patterns = (ABBREVIATED_LINE, CARD_LINE)
    checking_patterns = (SIGNED_LINE,)
    card_skip = re.compile(r"\b(?:total|pagamento|ajuste|encargos|iof|juros)\b", re.I)
    checking_skip = re.compile(r"\b(?:saldo|total|data|descrição)\b", re.I)
    card_income = re.compile(r"estorno|devolução|reembolso", re.I)


class InterRuleset(BankRuleset):
    bank = "Inter"
    card_patterns = (CARD_LINE_CURRENCY, ABBREVIATED_LINE)
    checking_patterns = (SIGNED_CURRENCY_LINE,)
    card_skip = re.compile(r"\b(?:total|pagamento|limite|disponível)\b", re.I)
    checking_skip = re.compile(r"\b(?:saldo|total|data|descrição|anterior)\b", re.I)
    card_income = re.compile(r"estorno|devolução|cashback", re.I)
    checking_income = re.compile(
        r"pix recebido|transferência recebida|crédito|ted recebida", re.I
    )

    def extract(self, text, statement_type, reference_date=None):
        if statement_type != CREDIT_CARD:
            # Newer exports group lines under "4 de Janeiro de 2025" headers
            sectioned = parse_long_date_sections(text, [PIX_RULE, PAYMENT_RULE])
            if sectioned:
                logger.debug("ruleset_extracted", bank=self.bank, count=len(sectioned),
                             layout="long_date")
                return sectioned
        return super().extract(text, statement_type, reference_date)


class ItauRuleset(BankRuleset):
    bank = "Itaú"
    card_patterns = (
        re.compile(rf"(?P<date>{DAY_MONTH})\s+(?P<desc>.+?)\s+(?P<amount>{AMOUNT})[ \t]*$", re.M),
        # Some invoices print the date after the merchant
        re.compile(
            rf"^(?![ \t]*{DAY_MONTH}\s)[ \t]*(?P<desc>.+?)\s+(?P<date>{DAY_MONTH})\s+"
            rf"(?P<amount>{AMOUNT})[ \t]*$",
            re.M,
        ),
    )
    checking_patterns = (CREDIT_DEBIT_LINE,)
    card_skip = re.compile(r"\b(?:total|pagamento|saldo|crédito anterior|encargos)\b", re.I)
    checking_skip = re.compile(r"\b(?:saldo|total|data|lançamento|anterior)\b", re.I)
    card_income = re.compile(r"estorno|credito|devolução", re.I)
    checking_income = re.compile(r"pix recebido|ted recebida|crédito|depósito", re.I)


class BTGRuleset(BankRuleset):
    bank = "BTG"
    card_patterns = (CURRENCY_SIGN_LINE,)
    checking_patterns = (CURRENCY_SIGN_LINE,)
    card_skip = checking_skip = re.compile(r"\b(?:saldo|total|data|descrição|limite)\b", re.I)
    card_income = re.compile(r"estorno|devolução|cashback", re.I)
    checking_income = re.compile(r"recebido|crédito|ted recebida|pix recebido", re.I)


class SantanderRuleset(BankRuleset):
    bank = "Santander"
    card_patterns = (CARD_LINE,)
    checking_patterns = (SIGNED_LINE,)
    card_skip = re.compile(r"\b(?:total|pagamento|saldo|encargos|iof|juros)\b", re.I)
    checking_skip = re.compile(r"\b(?:saldo|total|data|descrição|anterior)\b", re.I)
    card_income = re.compile(r"estorno|devolução|crédito", re.I)
    checking_income = re.compile(r"pix recebido|ted recebida|crédito|depósito", re.I)


class C6BankRuleset(BankRuleset):
    bank = "C6 Bank"
    card_patterns = checking_patterns = (CURRENCY_SIGN_LINE, ABBREVIATED_LINE)
    card_skip = checking_skip = re.compile(r"\b(?:saldo|total|data|descrição|limite)\b", re.I)
    card_income = re.compile(r"estorno|devolução|cashback|átomos", re.I)
    checking_income = re.compile(r"recebido|crédito|ted recebida|pix recebido", re.I)


class CoraRuleset(BankRuleset):
    bank = "Cora"
    checking_only = True
    checking_patterns = (CURRENCY_SIGN_LINE,)
    checking_skip = re.compile(r"\b(?:saldo|total|data|descrição|anterior)\b", re.I)
    checking_income = re.compile(
        r"recebido|crédito|ted recebida|pix recebido|boleto pago", re.I
    )


@dataclass(frozen=True)
class CardSection:
    """The slice of a multi-card invoice that belongs to one card."""

    last_digits: str
    holder_name: Optional[str]
    text: str


CARD_MARKER = re.compile(
    r"N[úu]mero do Cart[ãa]o\s+(?:[\dX*]{4}[ \t.-]*){3}(\d{4})", re.I
)
HOLDER_MARKER = re.compile(rf"(?i:total para)[ \t]+([{UPPER}]+(?:[ \t]+[{UPPER}]+)*)")


def detect_card_sections(text: str) -> list[CardSection]:
    """Split an invoice at "Número do Cartão" markers.

    The holder of each card is the nearest "Total para NAME" that follows its
    marker and precedes the next one. A section runs from the holder line (or
    the marker, without a holder) to the next card marker, or to "Total da
    fatura" for the last card.
    """
    cards = list(CARD_MARKER.finditer(text))
    holders = list(HOLDER_MARKER.finditer(text))
    sections = []

    for index, card in enumerate(cards):
        next_card_start = cards[index + 1].start() if index + 1 < len(cards) else len(text)
        holder = next(
            (h for h in holders if card.start() < h.start() < next_card_start), None
        )
        start = holder.end() if holder else card.end()
        end = next_card_start
        if index + 1 == len(cards):
            total_at = text.find("Total da fatura", start)
            if total_at > start:
                end = total_at
        sections.append(
            CardSection(
                last_digits=card.group(1),
                holder_name=collapse_whitespace(holder.group(1)) if holder else None,
                text=text[start:end],
            )
        )
    return sections


class BradescoRuleset(BankRuleset):
    bank = "Bradesco"
    card_patterns = (CARD_LINE,)
    checking_patterns = (CREDIT_DEBIT_LINE,)
    card_skip = re.compile(
        r"\b(?:total|subtotal|pagto|pagamento|data|histórico|lançamento|vencimento)\b", re.I
    )
    checking_skip = re.compile(r"\b(?:saldo|total|data|lançamento|anterior)\b", re.I)
    checking_income = re.compile(r"pix recebido|ted recebida|crédito|depósito", re.I)
    installment_pattern = TWO_DIGIT_INSTALLMENT_SUFFIX

    def extract(self, text, statement_type, reference_date=None):
        if statement_type != CREDIT_CARD:
            return super().extract(text, statement_type, reference_date)

        sections = detect_card_sections(text)
        if not sections:
            return super().extract(text, statement_type, reference_date)

        transactions = []
        for section in sections:
            found = self.scan(
                section.text,
                self.card_patterns,
                True,
                reference_date,
                card_last_digits=section.last_digits,
                card_holder_name=section.holder_name,
            )
            logger.debug(
                "card_section_extracted",
                last_digits=section.last_digits,
                holder=section.holder_name,
                count=len(found),
            )
            transactions.extend(found)
        return transactions


class GenericRuleset(BankRuleset):
    """Layout-agnostic rules for issuers without a dedicated ruleset."""

    bank = "Desconhecido"
    card_patterns = checking_patterns = (
        re.compile(
            r"(?P<date>\d{2}/\d{2}/\d{4})\s+(?P<desc>.+?)\s+R?\$?\s*"
            rf"(?P<amount>[+-]?{AMOUNT})"
        ),
        re.compile(
            rf"(?P<date>{DAY_MONTH})\s+(?P<desc>.+?)\s+R?\$?\s*(?P<amount>[+-]?{AMOUNT})"
        ),
        re.compile(
            r"(?P<date>\d{4}-\d{2}-\d{2})\s+(?P<desc>.+?)\s+R?\$?\s*"
            rf"(?P<amount>[+-]?{AMOUNT})"
        ),
    )
    card_skip = checking_skip = re.compile(
        r"^\s*(data|valor|descrição|total|saldo|anterior|limite)\s*$", re.I
    )
    card_income = re.compile(r"estorno|devolução|crédito|cashback", re.I)
    checking_income = INCOME_WORDS

    def extract(self, text, statement_type, reference_date=None):
        sectioned = parse_long_date_sections(text)
        if sectioned:
            logger.debug("ruleset_extracted", bank="generic", count=len(sectioned),
                         layout="long_date")
            return sectioned
        return super().extract(text, statement_type, reference_date)


GENERIC = GenericRuleset()

RULESETS: dict[str, BankRuleset] = {
    ruleset.bank: ruleset
    for ruleset in (
        NubankRuleset(),
        InterRuleset(),
        ItauRuleset(),
        BTGRuleset(),
        SantanderRuleset(),
        C6BankRuleset(),
        CoraRuleset(),
        BradescoRuleset(),
    )
}


def select_ruleset(text: str) -> Optional[BankRuleset]:
    """First ruleset, in precedence order, whose issuer appears in ``text``."""
    for ruleset in RULESETS.values():
        if ruleset.detect(text):
            return ruleset
    return None
