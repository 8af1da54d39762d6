from __future__ import annotations

from app.schemas.analysis import AnalysisCategory
from app.schemas.quote import QuoteRecord


SYSTEM_PROMPT = (
    "You are {product_name} Analyst, an Indian stock market analyst with deep expertise in "
    "NSE/BSE markets, fundamental analysis, technical analysis and investment research. "
    "Provide comprehensive, actionable insights with specific numbers, ratios and clear "
    "investment recommendations, with attention to Indian market dynamics, the regulatory "
    "environment and sector-specific trends."
)


def system_prompt(product_name: str) -> str:
    return SYSTEM_PROMPT.format(product_name=product_name)


def company_name(quote: QuoteRecord) -> str:
    return quote.name or f"{quote.symbol} Limited"


def _value(value: float | None, default: float) -> float:
    return default if value is None else value


def build_context(quote: QuoteRecord) -> str:
    change_percent = _value(quote.change_percent, 0.0)
    sign = "+" if change_percent >= 0 else ""
    lines = [
        f"**{company_name(quote)}** ({quote.symbol})",
        f"Sector: {quote.sector or 'Market'}",
        f"Current Price: ₹{_value(quote.price, 0.0):.2f}",
        f"Market Cap: {quote.market_cap or 'N/A'}",
        f"P/E Ratio: {_value(quote.pe_ratio, 0.0):.2f}x",
        f"Today's Change: {sign}{change_percent:.2f}%",
        f"Volume: {_value(quote.volume, 0):,.0f}",
        f"52W High: ₹{_value(quote.fifty_two_week_high, 0.0):.2f}",
        f"52W Low: ₹{_value(quote.fifty_two_week_low, 0.0):.2f}",
        f"ROE: {_value(quote.roe, 15.0):.1f}%",
        f"ROA: {_value(quote.roa, 8.0):.1f}%",
        f"Debt-to-Equity: {_value(quote.debt_to_equity, 0.5):.2f}x",
        f"Current Ratio: {_value(quote.current_ratio, 1.5):.1f}x",
        f"P/B Ratio: {_value(quote.pb_ratio, 3.0):.1f}x",
        f"Promoter Holding: {_value(quote.promoter_holding, 50.0):.1f}%",
        f"Institutional Holding: {_value(quote.institutional_holding, 30.0):.1f}%",
        f"Public Holding: {_value(quote.public_holding, 20.0):.1f}%",
    ]
    return "\n".join(lines)


def _custom_prompt(context: str, custom_query: str) -> str:
    return f"""{context}

**Custom Analysis Request:** {custom_query}

Provide comprehensive analysis addressing the specific query while incorporating:
- Current market position and valuation assessment
- Financial health and key ratios analysis
- Shareholding pattern implications
- Growth prospects and risk factors
- Investment recommendation with specific price targets
- Sector comparison and competitive positioning

Focus on Indian market context, NSE/BSE dynamics, and provide actionable insights with specific numerical targets and timeframes."""


def _overview_prompt(context: str, quote: QuoteRecord) -> str:
    name = company_name(quote)
    price = _value(quote.price, 0.0)
    return f"""{context}

Provide a comprehensive business overview analysis for **{name}**:

**Business Model & Operations:**
- Core business segments and revenue breakdown by division
- Market leadership position and competitive advantages
- Recent strategic initiatives, expansion plans and capex allocation

**Financial Health & Performance:**
- Revenue growth trajectory and profitability trends
- Balance sheet strength, debt levels and working capital management
- Return ratios: ROE {_value(quote.roe, 15.0):.1f}%, ROA {_value(quote.roa, 8.0):.1f}%

**Investment Perspective & Valuation:**
- Current P/E {_value(quote.pe_ratio, 0.0):.2f}x vs historical average and sector peers
- Price targets: Conservative ₹{price * 1.1:.0f}, Optimistic ₹{price * 1.25:.0f}
- Entry levels and stop-loss recommendations

**Growth Catalysts & Risk Factors:**
- Industry tailwinds and company-specific growth drivers
- Regulatory changes and competition intensity

Provide specific insights for **{name}** with actionable investment guidance."""


def _fundamentals_prompt(context: str, quote: QuoteRecord) -> str:
    name = company_name(quote)
    return f"""{context}

Conduct detailed fundamental analysis for **{name}**:

**Valuation Framework:**
- P/E Ratio: current {_value(quote.pe_ratio, 0.0):.2f}x vs 3/5-year average, sector median and PEG
- Price-to-Book: {_value(quote.pb_ratio, 3.0):.1f}x against book value quality
- EV/EBITDA and EV/Sales multiples with peer comparison

**Financial Ratio Deep Dive:**
- Profitability: ROE {_value(quote.roe, 15.0):.1f}%, ROA {_value(quote.roa, 8.0):.1f}%
- Leverage: D/E {_value(quote.debt_to_equity, 0.5):.2f}x, interest coverage, debt maturity profile
- Liquidity: current ratio {_value(quote.current_ratio, 1.5):.1f}x, cash conversion cycle

**Quality & Growth Assessment:**
- Earnings quality, revenue visibility and competitive moat
- Management track record and capital allocation discipline

Close with a fundamental quality rating and an entry strategy."""


def _financials_prompt(context: str, quote: QuoteRecord) -> str:
    name = company_name(quote)
    return f"""{context}

Analyse the financial statements of **{name}**:

**Profit & Loss:**
- Revenue and net profit trend over the last five years
- Gross, EBITDA, operating and net margin trajectory

**Balance Sheet:**
- Asset quality, debt-to-equity {_value(quote.debt_to_equity, 0.5):.2f}x and working capital

**Cash Flow:**
- Operating cash flow conversion, free cash flow and capex intensity

Conclude with the key financial strengths, red flags and what to monitor next quarter."""


def _shareholding_prompt(context: str, quote: QuoteRecord) -> str:
    name = company_name(quote)
    return f"""{context}

Analyse the shareholding pattern of **{name}**:

**Promoter Holdings:** {_value(quote.promoter_holding, 50.0):.1f}% - stability, pledge levels and alignment
**Institutional Holdings:** {_value(quote.institutional_holding, 30.0):.1f}% - FII/DII confidence and recent changes
**Public Holdings:** {_value(quote.public_holding, 20.0):.1f}% - retail participation and liquidity

Cover governance quality, minority shareholder protection and the investment implications of the ownership structure."""


def build_prompt(
    quote: QuoteRecord, category: AnalysisCategory, custom_query: str | None = None
) -> str:
    context = build_context(quote)
    if custom_query and custom_query.strip():
        return _custom_prompt(context, custom_query.strip())
    if category is AnalysisCategory.FUNDAMENTALS:
        return _fundamentals_prompt(context, quote)
    if category is AnalysisCategory.FINANCIALS:
        return _financials_prompt(context, quote)
    if category is AnalysisCategory.SHAREHOLDING:
        return _shareholding_prompt(context, quote)
    return _overview_prompt(context, quote)
