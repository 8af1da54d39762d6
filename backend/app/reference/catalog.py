from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from app.schemas.quote import QuoteRecord


_EXCHANGE_SUFFIXES = (".NS", ".BO")
_LOGO_URL = "https://logo.clearbit.com/{domain}"
_AVATAR_URL = "https://ui-avatars.com/api/?name={initial}&background=6366f1&color=fff&size=64&bold=true"


class CompanyDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    sector: str
    exchange: str = "NSE"
    region: str = "India"
    domain: Optional[str] = None
    description: Optional[str] = None
    headquarters: Optional[str] = None
    ceo: Optional[str] = None
    employees: Optional[str] = None
    founded: Optional[str] = None
    website: Optional[str] = None
    market_cap: Optional[str] = None
    pe_ratio: Optional[float] = None
    pb_ratio: Optional[float] = None
    roe: Optional[float] = None
    roa: Optional[float] = None
    debt_to_equity: Optional[float] = None
    current_ratio: Optional[float] = None
    promoter_holding: Optional[float] = None
    institutional_holding: Optional[float] = None
    public_holding: Optional[float] = None

    @property
    def listed_symbol(self) -> str:
        if self.exchange == "NSE":
            return f"{self.symbol}.NS"
        if self.exchange == "BSE":
            return f"{self.symbol}.BO"
        return self.symbol


def normalize_symbol(symbol: str) -> str:
    cleaned = symbol.strip().upper()
    for suffix in _EXCHANGE_SUFFIXES:
        if cleaned.endswith(suffix):
            return cleaned[: -len(suffix)]
    return cleaned


def avatar_url(name: str) -> str:
    initial = (name.strip() or "?")[0].upper()
    return _AVATAR_URL.format(initial=quote(initial))


class ReferenceCatalog:
    """Read-only lookup of static company descriptors keyed by normalized symbol."""

    def __init__(self, companies: Iterable[CompanyDescriptor]) -> None:
        self._companies: Mapping[str, CompanyDescriptor] = MappingProxyType(
            {normalize_symbol(company.symbol): company for company in companies}
        )

    def __len__(self) -> int:
        return len(self._companies)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and normalize_symbol(symbol) in self._companies

    def get(self, symbol: str) -> CompanyDescriptor | None:
        return self._companies.get(normalize_symbol(symbol))

    def search(self, query: str) -> list[CompanyDescriptor]:
        needle = query.strip().casefold()
        if not needle:
            return []
        return [
            company
            for company in self._companies.values()
            if needle in company.symbol.casefold()
            or needle in company.name.casefold()
            or needle in company.sector.casefold()
        ]

    def logo_url(self, symbol: str, name: str | None = None) -> str:
        company = self.get(symbol)
        if company and company.domain:
            return _LOGO_URL.format(domain=company.domain)
        display_name = name or (company.name if company else normalize_symbol(symbol))
        return avatar_url(display_name)

    def describe(self, symbol: str) -> QuoteRecord | None:
        company = self.get(symbol)
        if company is None:
            return None
        return QuoteRecord(
            symbol=normalize_symbol(symbol),
            name=company.name,
            sector=company.sector,
            exchange=company.exchange,
            logo=self.logo_url(symbol),
            market_cap=company.market_cap,
            pe_ratio=company.pe_ratio,
            pb_ratio=company.pb_ratio,
            roe=company.roe,
            roa=company.roa,
            debt_to_equity=company.debt_to_equity,
            current_ratio=company.current_ratio,
            promoter_holding=company.promoter_holding,
            institutional_holding=company.institutional_holding,
            public_holding=company.public_holding,
            description=company.description,
            headquarters=company.headquarters,
            ceo=company.ceo,
            employees=company.employees,
            founded=company.founded,
            website=company.website,
        )


DEFAULT_COMPANIES: tuple[CompanyDescriptor, ...] = (
    CompanyDescriptor(
        symbol="RELIANCE",
        name="Reliance Industries Limited",
        sector="Oil & Gas",
        domain="ril.com",
        description=(
            "India's largest private sector company with interests in petrochemicals, "
            "oil & gas, telecommunications, and retail"
        ),
        headquarters="Mumbai, India",
        ceo="Mukesh Ambani",
        employees="236000+",
        founded="1973",
        website="https://www.ril.com",
        market_cap="₹9,31,000 Cr",
        pe_ratio=15.2,
        pb_ratio=1.8,
        roe=9.8,
        roa=4.2,
        debt_to_equity=0.35,
        current_ratio=1.4,
        promoter_holding=50.3,
        institutional_holding=23.1,
        public_holding=26.6,
    ),
    CompanyDescriptor(
        symbol="TCS",
        name="Tata Consultancy Services Limited",
        sector="IT Services",
        domain="tcs.com",
        description="Leading global IT services, consulting and business solutions organization",
        headquarters="Mumbai, India",
        ceo="K Krithivasan",
        employees="528000+",
        founded="1968",
        website="https://www.tcs.com",
        market_cap="₹11,45,000 Cr",
        pe_ratio=28.5,
        pb_ratio=11.2,
        roe=42.1,
        roa=22.8,
        debt_to_equity=0.05,
        current_ratio=2.8,
        promoter_holding=72.2,
        institutional_holding=15.8,
        public_holding=12.0,
    ),
    CompanyDescriptor(
        symbol="HDFCBANK",
        name="HDFC Bank Limited",
        sector="Banking",
        domain="hdfcbank.com",
        description="India's largest private sector bank by assets and market capitalization",
        headquarters="Mumbai, India",
        ceo="Sashidhar Jagdishan",
        employees="150000+",
        founded="1994",
        website="https://www.hdfcbank.com",
        market_cap="₹7,42,000 Cr",
        pe_ratio=18.7,
        pb_ratio=2.9,
        roe=17.2,
        roa=1.8,
        debt_to_equity=6.2,
        current_ratio=1.1,
        promoter_holding=0.0,
        institutional_holding=75.2,
        public_holding=24.8,
    ),
    CompanyDescriptor(
        symbol="INFY",
        name="Infosys Limited",
        sector="IT Services",
        domain="infosys.com",
        description="Global leader in next-generation digital services and consulting",
        headquarters="Bangalore, India",
        ceo="Salil Parekh",
        employees="314000+",
        founded="1981",
        website="https://www.infosys.com",
        market_cap="₹6,38,000 Cr",
        pe_ratio=25.4,
        pb_ratio=7.8,
        roe=31.8,
        roa=19.2,
        debt_to_equity=0.08,
        current_ratio=2.4,
        promoter_holding=13.2,
        institutional_holding=38.5,
        public_holding=48.3,
    ),
    CompanyDescriptor(
        symbol="ITC",
        name="ITC Limited",
        sector="FMCG",
        domain="itcportal.com",
        description=(
            "Leading Indian conglomerate in FMCG, hotels, paperboards, packaging "
            "and agri-business"
        ),
        headquarters="Kolkata, India",
        ceo="Sanjiv Puri",
        employees="25000+",
        founded="1910",
        website="https://www.itcportal.com",
        market_cap="₹5,01,000 Cr",
        pe_ratio=22.8,
        pb_ratio=5.2,
        roe=24.8,
        roa=12.4,
        debt_to_equity=0.12,
        current_ratio=2.8,
        promoter_holding=0.0,
        institutional_holding=65.4,
        public_holding=34.6,
    ),
    CompanyDescriptor(
        symbol="HINDUNILVR",
        name="Hindustan Unilever Limited",
        sector="FMCG",
        domain="hul.co.in",
        description="Leading FMCG company with strong portfolio of trusted brands",
        headquarters="Mumbai, India",
        ceo="Rohit Jawa",
        employees="18000+",
        founded="1933",
        website="https://www.hul.co.in",
        market_cap="₹6,28,000 Cr",
        pe_ratio=58.9,
        pb_ratio=12.8,
        roe=82.4,
        roa=28.6,
        debt_to_equity=0.02,
        current_ratio=1.6,
        promoter_holding=67.2,
        institutional_holding=19.8,
        public_holding=13.0,
    ),
    CompanyDescriptor(symbol="ICICIBANK", name="ICICI Bank Limited", sector="Banking", domain="icicibank.com"),
    CompanyDescriptor(symbol="SBIN", name="State Bank of India", sector="Banking", domain="sbi.co.in"),
    CompanyDescriptor(symbol="BHARTIARTL", name="Bharti Airtel Limited", sector="Telecom", domain="airtel.in"),
    CompanyDescriptor(symbol="KOTAKBANK", name="Kotak Mahindra Bank Limited", sector="Banking", domain="kotak.com"),
    CompanyDescriptor(symbol="LT", name="Larsen & Toubro Limited", sector="Infrastructure"),
    CompanyDescriptor(symbol="ASIANPAINT", name="Asian Paints Limited", sector="Paints"),
    CompanyDescriptor(symbol="MARUTI", name="Maruti Suzuki India Limited", sector="Automotive"),
    CompanyDescriptor(symbol="SUNPHARMA", name="Sun Pharmaceutical Industries Limited", sector="Pharmaceuticals"),
    CompanyDescriptor(symbol="TITAN", name="Titan Company Limited", sector="Jewelry"),
    CompanyDescriptor(symbol="NESTLEIND", name="Nestle India Limited", sector="FMCG"),
    CompanyDescriptor(symbol="WIPRO", name="Wipro Limited", sector="IT Services"),
    CompanyDescriptor(symbol="ULTRACEMCO", name="UltraTech Cement Limited", sector="Cement"),
    CompanyDescriptor(symbol="AXISBANK", name="Axis Bank Limited", sector="Banking"),
    CompanyDescriptor(symbol="HCLTECH", name="HCL Technologies Limited", sector="IT Services"),
    CompanyDescriptor(symbol="AAPL", name="Apple Inc.", sector="Technology", exchange="NASDAQ", region="US", domain="apple.com"),
    CompanyDescriptor(symbol="MSFT", name="Microsoft Corporation", sector="Technology", exchange="NASDAQ", region="US", domain="microsoft.com"),
    CompanyDescriptor(symbol="GOOGL", name="Alphabet Inc.", sector="Technology", exchange="NASDAQ", region="US", domain="google.com"),
    CompanyDescriptor(symbol="AMZN", name="Amazon.com Inc.", sector="E-commerce", exchange="NASDAQ", region="US", domain="amazon.com"),
    CompanyDescriptor(symbol="TSLA", name="Tesla Inc.", sector="Automotive", exchange="NASDAQ", region="US", domain="tesla.com"),
    CompanyDescriptor(symbol="META", name="Meta Platforms Inc.", sector="Social Media", exchange="NASDAQ", region="US", domain="meta.com"),
    CompanyDescriptor(symbol="NVDA", name="NVIDIA Corporation", sector="Semiconductors", exchange="NASDAQ", region="US", domain="nvidia.com"),
    CompanyDescriptor(symbol="NFLX", name="Netflix Inc.", sector="Entertainment", exchange="NASDAQ", region="US"),
    CompanyDescriptor(symbol="ADBE", name="Adobe Inc.", sector="Software", exchange="NASDAQ", region="US"),
    CompanyDescriptor(symbol="CRM", name="Salesforce Inc.", sector="Software", exchange="NYSE", region="US"),
)


def default_catalog() -> ReferenceCatalog:
    return ReferenceCatalog(DEFAULT_COMPANIES)
