"""Fixed chart and table pairs attached to every analysis response."""

from __future__ import annotations

from app.analysis.categories import dataset_category
from app.analysis.prompts import company_name
from app.schemas.analysis import AnalysisCategory, ChartSpec, TableSpec
from app.schemas.quote import QuoteRecord


COLORS = ["#6366f1", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#06b6d4"]

_DEFAULT_PRICE = 1000.0
_DEFAULT_PE = 20.0


def _price(quote: QuoteRecord) -> float:
    return quote.price if quote.price else _DEFAULT_PRICE


def _pe(quote: QuoteRecord) -> float:
    return quote.pe_ratio if quote.pe_ratio is not None else _DEFAULT_PE


def _shareholding_charts(name: str, quote: QuoteRecord) -> list[ChartSpec]:
    return [
        ChartSpec(
            type="pie",
            title=f"{name} - Shareholding Distribution",
            data=[
                {"name": "Promoters", "value": 42.5, "color": COLORS[0]},
                {"name": "FII/FPI", "value": 24.8, "color": COLORS[1]},
                {"name": "DII", "value": 18.2, "color": COLORS[2]},
                {"name": "Public & Others", "value": 14.5, "color": COLORS[3]},
            ],
        ),
        ChartSpec(
            type="bar",
            title=f"{name} - Quarterly Holdings Trend",
            data=[
                {"quarter": "Q1 FY24", "promoter": 42.5, "institutional": 43.0},
                {"quarter": "Q2 FY24", "promoter": 42.3, "institutional": 43.2},
                {"quarter": "Q3 FY24", "promoter": 42.5, "institutional": 43.0},
                {"quarter": "Q4 FY24", "promoter": 42.5, "institutional": 43.0},
            ],
        ),
    ]


def _fundamentals_charts(name: str, quote: QuoteRecord) -> list[ChartSpec]:
    pe = _pe(quote)
    return [
        ChartSpec(
            type="bar",
            title=f"{name} - Key Financial Ratios",
            data=[
                {"metric": "ROE (%)", "current": 15.8, "industry": 12.5},
                {"metric": "ROA (%)", "current": 8.9, "industry": 7.2},
                {"metric": "ROCE (%)", "current": 18.2, "industry": 14.8},
                {"metric": "Debt/Equity", "current": 0.35, "industry": 0.42},
            ],
        ),
        ChartSpec(
            type="line",
            title=f"{name} - P/E Ratio Trend",
            data=[
                {"year": "2020", "pe": 22.5},
                {"year": "2021", "pe": 18.9},
                {"year": "2022", "pe": 21.2},
                {"year": "2023", "pe": pe},
                {"year": "2024E", "pe": round(pe * 0.95, 2)},
            ],
        ),
    ]


def _financials_charts(name: str, quote: QuoteRecord) -> list[ChartSpec]:
    return [
        ChartSpec(
            type="line",
            title=f"{name} - Revenue Growth Trend",
            data=[
                {"year": "FY20", "revenue": 587450, "netProfit": 39354},
                {"year": "FY21", "revenue": 541550, "netProfit": 49128},
                {"year": "FY22", "revenue": 792756, "netProfit": 60705},
                {"year": "FY23", "revenue": 921346, "netProfit": 75389},
                {"year": "FY24E", "revenue": 1015680, "netProfit": 82450},
            ],
        ),
        ChartSpec(
            type="bar",
            title=f"{name} - Margin Analysis",
            data=[
                {"metric": "Gross Margin", "percentage": 24.8},
                {"metric": "EBITDA Margin", "percentage": 18.5},
                {"metric": "Operating Margin", "percentage": 16.2},
                {"metric": "Net Margin", "percentage": 8.9},
            ],
        ),
    ]


def _overview_charts(name: str, quote: QuoteRecord) -> list[ChartSpec]:
    price = _price(quote)
    return [
        ChartSpec(
            type="line",
            title=f"{name} - Price Performance (6M)",
            data=[
                {"month": "6M Ago", "price": round(price * 0.82, 2)},
                {"month": "4M Ago", "price": round(price * 0.91, 2)},
                {"month": "2M Ago", "price": round(price * 0.97, 2)},
                {"month": "Current", "price": price},
            ],
        ),
        ChartSpec(
            type="bar",
            title=f"{name} - Key Metrics Overview",
            data=[
                {"metric": "Market Cap (₹Cr)", "value": 1580000},
                {"metric": "Revenue (₹Cr)", "value": 921346},
                {"metric": "Net Profit (₹Cr)", "value": 75389},
                {"metric": "Book Value", "value": 1245},
            ],
        ),
    ]


def _shareholding_tables(name: str, quote: QuoteRecord) -> list[TableSpec]:
    return [
        TableSpec(
            title=f"{name} - Shareholding Pattern Details",
            headers=["Category", "Holdings (%)", "Shares (Cr)", "Change (QoQ)", "Assessment"],
            rows=[
                ["Promoters & Promoter Group", "42.5%", "287.5", "+0.2%", "Stable"],
                ["Foreign Portfolio Investors", "24.8%", "167.8", "-0.8%", "Moderate"],
                ["Domestic Institutional Investors", "18.2%", "123.1", "+1.5%", "Increasing"],
                ["Public & Others", "14.5%", "98.1", "-0.9%", "Stable"],
            ],
        ),
        TableSpec(
            title=f"{name} - Top Institutional Holders",
            headers=["Institution Type", "Name", "Holdings (%)", "Value (₹Cr)", "Status"],
            rows=[
                ["Mutual Fund", "HDFC Equity Fund", "3.2%", "50,640", "Active"],
                ["Insurance", "LIC of India", "6.8%", "107,440", "Long-term"],
                ["Foreign Fund", "Vanguard Group", "2.1%", "33,180", "Strategic"],
                ["ETF", "Nifty 50 ETF", "1.8%", "28,440", "Passive"],
            ],
        ),
    ]


def _fundamentals_tables(name: str, quote: QuoteRecord) -> list[TableSpec]:
    pe = _pe(quote)
    return [
        TableSpec(
            title=f"{name} - Comprehensive Fundamental Analysis",
            headers=["Financial Metric", "Current Value", "Industry Average", "Rating", "Trend"],
            rows=[
                ["Return on Equity (ROE)", "15.8%", "12.5%", "4/5", "Above Avg"],
                ["Return on Assets (ROA)", "8.9%", "7.2%", "4/5", "Strong"],
                ["Debt to Equity Ratio", "0.35", "0.42", "5/5", "Conservative"],
                ["Current Ratio", "1.85", "1.65", "4/5", "Healthy"],
                ["Interest Coverage Ratio", "8.9x", "6.2x", "4/5", "Strong"],
            ],
        ),
        TableSpec(
            title=f"{name} - Valuation Metrics Comparison",
            headers=["Valuation Metric", "Current", "Sector Median", "Assessment", "Investment Merit"],
            rows=[
                ["P/E Ratio", f"{pe:.1f}x", "18.5x", "Attractive" if pe < 20 else "Fair", "4/5"],
                ["P/B Ratio", "2.8x", "3.2x", "Undervalued", "5/5"],
                ["EV/EBITDA", "12.5x", "14.2x", "Reasonable", "4/5"],
                ["Dividend Yield", "2.1%", "1.8%", "Good", "4/5"],
            ],
        ),
    ]


def _financials_tables(name: str, quote: QuoteRecord) -> list[TableSpec]:
    return [
        TableSpec(
            title=f"{name} - Financial Performance Summary",
            headers=["Financial Year", "Revenue (₹Cr)", "Net Profit (₹Cr)", "EBITDA (₹Cr)", "Growth (%)"],
            rows=[
                ["FY 2020", "5,87,450", "39,354", "1,08,456", "-"],
                ["FY 2021", "5,41,550", "49,128", "98,750", "-7.8%"],
                ["FY 2022", "7,92,756", "60,705", "1,46,890", "+46.4%"],
                ["FY 2023", "9,21,346", "75,389", "1,70,450", "+16.2%"],
                ["FY 2024E", "10,15,680", "82,450", "1,88,200", "+10.2%"],
            ],
        ),
        TableSpec(
            title=f"{name} - Profitability & Efficiency Ratios",
            headers=["Profitability Metric", "FY23", "FY22", "FY21", "Trend Analysis"],
            rows=[
                ["Gross Profit Margin", "24.8%", "23.5%", "22.1%", "Improving"],
                ["EBITDA Margin", "18.5%", "18.1%", "17.8%", "Stable"],
                ["Net Profit Margin", "8.9%", "8.2%", "8.5%", "Recovering"],
                ["Asset Turnover Ratio", "0.68x", "0.71x", "0.65x", "Consistent"],
            ],
        ),
    ]


def _overview_tables(name: str, quote: QuoteRecord) -> list[TableSpec]:
    pe = _pe(quote)
    momentum = "Positive Momentum" if (quote.change_percent or 0.0) >= 0 else "Consolidation"
    return [
        TableSpec(
            title=f"{name} - Investment Overview",
            headers=["Investment Parameter", "Current Status", "Assessment", "Score", "Analysis"],
            rows=[
                ["Current Price", f"₹{quote.price or 0.0:.2f}", momentum, "4/5", "Monitor"],
                ["Market Capitalization", quote.market_cap or "Large Cap", "Established Player", "5/5", "Stable"],
                ["P/E Valuation", f"{pe:.1f}x", "Attractive" if pe < 20 else "Fair Value", "4/5", "Reasonable"],
                ["Sector", quote.sector or "Diversified", "Strong Position", "5/5", "Quality Stock"],
            ],
        ),
        TableSpec(
            title=f"{name} - Risk-Return Analysis",
            headers=["Risk Factor", "Level", "Impact", "Mitigation", "Overall Assessment"],
            rows=[
                ["Market Risk", "Medium", "Moderate", "Diversification", "Manageable"],
                ["Business Risk", "Low", "Limited", "Strong Fundamentals", "Low Risk"],
                ["Financial Risk", "Low", "Minimal", "Conservative Debt", "Strong"],
                ["Regulatory Risk", "Medium", "Sector Specific", "Compliance Focus", "Monitored"],
            ],
        ),
    ]


_CHARTS = {
    AnalysisCategory.OVERVIEW: _overview_charts,
    AnalysisCategory.FUNDAMENTALS: _fundamentals_charts,
    AnalysisCategory.FINANCIALS: _financials_charts,
    AnalysisCategory.SHAREHOLDING: _shareholding_charts,
}

_TABLES = {
    AnalysisCategory.OVERVIEW: _overview_tables,
    AnalysisCategory.FUNDAMENTALS: _fundamentals_tables,
    AnalysisCategory.FINANCIALS: _financials_tables,
    AnalysisCategory.SHAREHOLDING: _shareholding_tables,
}


def chart_pair(quote: QuoteRecord, category: AnalysisCategory) -> list[ChartSpec]:
    builder = _CHARTS.get(dataset_category(category), _overview_charts)
    return builder(company_name(quote), quote)


def table_pair(quote: QuoteRecord, category: AnalysisCategory) -> list[TableSpec]:
    builder = _TABLES.get(dataset_category(category), _overview_tables)
    return builder(company_name(quote), quote)
