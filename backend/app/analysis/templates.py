from __future__ import annotations

from app.analysis.prompts import company_name
from app.config.settings import AnalysisSettings
from app.schemas.analysis import AnalysisCategory
from app.schemas.quote import QuoteRecord


def _value(value: float | None, default: float) -> float:
    return default if value is None else value


def recommendation(quote: QuoteRecord, thresholds: AnalysisSettings) -> str:
    pe = _value(quote.pe_ratio, 20.0)
    roe = _value(quote.roe, 15.0)
    momentum_up = _value(quote.change_percent, 0.0) >= 0
    if pe < thresholds.buy_pe_threshold and roe > thresholds.buy_roe_threshold and momentum_up:
        return "BUY"
    if pe < thresholds.hold_pe_threshold:
        return "HOLD"
    return "WATCH"


def _valuation_label(pe: float) -> str:
    if pe < 20:
        return "attractive valuation"
    if pe < 30:
        return "fair valuation"
    return "premium valuation"


def _overview(quote: QuoteRecord, thresholds: AnalysisSettings) -> str:
    name = company_name(quote)
    price = _value(quote.price, 0.0)
    change_percent = _value(quote.change_percent, 0.0)
    pe = _value(quote.pe_ratio, 20.0)
    pb = _value(quote.pb_ratio, 3.0)
    momentum = "positive momentum" if change_percent >= 0 else "a correction phase"
    if pb < 2:
        pb_label = "value opportunity"
    elif pb < 4:
        pb_label = "reasonable pricing"
    else:
        pb_label = "growth premium"
    call = recommendation(quote, thresholds)
    horizon = "12-18 month" if pe < thresholds.buy_pe_threshold else "18-24 month"
    leverage = (
        "Low debt levels provide financial stability"
        if _value(quote.debt_to_equity, 0.5) < 0.5
        else "Moderate leverage requires monitoring"
    )
    outlook = "positive" if quote.sector in ("IT Services", "Banking") else "stable"
    return f"""**{name} - Market Analysis**

**Current Market Position:**
{name} is currently trading at ₹{price:.2f} with a market cap of {quote.market_cap or 'N/A'}. The stock is showing {momentum} with {change_percent:.2f}% movement today.

**Valuation Assessment:**
- P/E Ratio: {pe:.1f}x indicating {_valuation_label(pe)}
- Price-to-Book: {pb:.1f}x suggesting {pb_label}
- Sector: {quote.sector or 'Diversified'}

**Investment Recommendation:**
Based on current metrics, {name} presents a {call} opportunity for investors with a {horizon} investment horizon.

**Price Targets:**
- Conservative: ₹{price * 1.1:.0f}
- Optimistic: ₹{price * 1.25:.0f}

**Risk Assessment:**
{leverage}. Sector outlook remains {outlook}."""


def _fundamentals(quote: QuoteRecord, thresholds: AnalysisSettings) -> str:
    name = company_name(quote)
    roe = _value(quote.roe, 15.0)
    roa = _value(quote.roa, 8.0)
    current_ratio = _value(quote.current_ratio, 1.5)
    debt_to_equity = _value(quote.debt_to_equity, 0.5)
    pe = _value(quote.pe_ratio, 20.0)

    roe_label = "Excellent" if roe > 18 else "Good" if roe > 12 else "Average"
    roa_label = "superior" if roa > 10 else "adequate" if roa > 6 else "moderate"
    liquidity = "strong" if current_ratio > 2 else "healthy" if current_ratio > 1.2 else "tight"
    structure = (
        "conservative" if debt_to_equity < 0.3 else "moderate" if debt_to_equity < 0.7 else "aggressive"
    )
    if pe < 20 and roe > 15:
        score = "9/10 (Excellent)"
    elif pe < 25 and roe > 12:
        score = "7/10 (Good)"
    else:
        score = "6/10 (Fair)"
    return f"""**{name} - Fundamental Analysis**

**Financial Strength Indicators:**
- Return on Equity: {roe:.1f}% - {roe_label} profitability
- Return on Assets: {roa:.1f}% indicating {roa_label} asset utilization
- Current Ratio: {current_ratio:.1f}x showing {liquidity} liquidity position
- Debt-to-Equity: {debt_to_equity:.2f}x reflecting a {structure} capital structure

**Investment Merit:**
Overall fundamental score: {score}
Recommendation: {recommendation(quote, thresholds)}

**Strategic Outlook:**
{name} demonstrates {'strong' if roe > 15 else 'adequate'} fundamental characteristics suitable for {'growth and value investors' if pe < 20 else 'long-term wealth creation'}."""


def _financials(quote: QuoteRecord, thresholds: AnalysisSettings) -> str:
    name = company_name(quote)
    roa = _value(quote.roa, 8.0)
    debt_to_equity = _value(quote.debt_to_equity, 0.5)
    return f"""**{name} - Financial Analysis**

**Profitability:**
- Return on assets of {roa:.1f}% with an estimated asset turnover of {roa / 5:.2f}x
- Margins are tracked against sector peers in the tables below

**Balance Sheet:**
- Debt-to-equity of {debt_to_equity:.2f}x; {'leverage is comfortably covered' if debt_to_equity < 1 else 'leverage warrants close monitoring'}
- Current ratio of {_value(quote.current_ratio, 1.5):.1f}x

**Recommendation:** {recommendation(quote, thresholds)} with focus on cash flow conversion in coming quarters."""


def _shareholding(quote: QuoteRecord, thresholds: AnalysisSettings) -> str:
    name = company_name(quote)
    promoter = _value(quote.promoter_holding, 50.0)
    institutional = _value(quote.institutional_holding, 30.0)
    public = _value(quote.public_holding, 20.0)
    if promoter > 40 and institutional > 25:
        governance = "9/10 (Excellent)"
    elif institutional > 30:
        governance = "8/10 (Very Good)"
    else:
        governance = "7/10 (Good)"
    if public > 25:
        liquidity = "Excellent trading liquidity"
    elif public > 15:
        liquidity = "Good liquidity levels"
    else:
        liquidity = "Adequate float for trading"
    return f"""**{name} - Shareholding Pattern Analysis**

**Promoter Holdings:**
- Promoter Stake: {promoter:.1f}%
- Commitment Level: {'Strong promoter control indicating long-term commitment' if promoter > 50 else 'Professional management with balanced ownership'}

**Institutional Participation:**
- Institutional Holdings: {institutional:.1f}%
- FII/DII Confidence: {'High institutional confidence' if institutional > 35 else 'Moderate institutional support' if institutional > 25 else 'Selective institutional participation'}

**Public Shareholding:**
- Public Holdings: {public:.1f}%
- Liquidity Factor: {liquidity}

**Governance Assessment:**
- Overall Score: {governance}

**Investment Implications:**
The shareholding pattern indicates {name} as a {'institutionally endorsed' if institutional > 30 else 'fundamentally sound'} investment with {'strong promoter alignment' if promoter > 50 else 'professional management'}."""


_TEMPLATES = {
    AnalysisCategory.OVERVIEW: _overview,
    AnalysisCategory.FUNDAMENTALS: _fundamentals,
    AnalysisCategory.FINANCIALS: _financials,
    AnalysisCategory.SHAREHOLDING: _shareholding,
}


def render_fallback(
    quote: QuoteRecord,
    category: AnalysisCategory,
    thresholds: AnalysisSettings,
    custom_query: str | None = None,
) -> str:
    template = _TEMPLATES.get(category, _overview)
    narrative = template(quote, thresholds)
    if custom_query and custom_query.strip():
        return (
            f"**Custom Analysis for {company_name(quote)}**\n\n"
            f"**Query:** {custom_query.strip()}\n\n{narrative}"
        )
    return narrative
