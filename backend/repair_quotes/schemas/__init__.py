from .catalog import (
    CatalogServiceOut,
    CatalogPartOut,
    ServiceCategoryGroup,
    PricingConfigOut,
    PricingConfigUpdate,
)
from .repair_quote import (
    ClientInfo,
    LogisticsOverrideIn,
    PartSelectionIn,
    ManualServiceIn,
    ManualPartIn,
    ComboIn,
    SelectionIn,
    QuoteRequest,
    PricedServiceOut,
    PricedPartOut,
    TotalsOut,
    CustomerSummaryOut,
    TechnicianSummaryOut,
    QuotePreviewOut,
    ComboOut,
    ClientMessageOut,
    WorkOrderCreated,
)
