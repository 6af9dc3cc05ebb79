"""Shared page fixtures for faturaexport tests."""

import pytest
from lxml import html

STATEMENT_PAGE = """<!DOCTYPE html>
<html>
<head><title>Itaú</title></head>
<body>
<div id="render-mf-shell-bkl-cartoes-pf">
  <mf-shell-bkl-cartoes-pf>
    <mft-wc-wrapper>
      <div>
        <mf-cartoesconsultafaturapfmf>
          <template shadowrootmode="open">
            <mf-fatura-main>
              <mf-fatura-lib>
                <div><h1 class="header-invoice__tittle">Fatura de outubro 2026</h1></div>
              </mf-fatura-lib>
            </mf-fatura-main>
            <div id="ids-tabs-0-panel-1">
              <mf-fatura-transactions-details>
                <template shadowrootmode="open">
                  <div class="fatura__transactions-details">
                    <table class="details__table">
                      <tr><th>data</th><th>lançamento</th><th>valor</th></tr>
                      <tr><td>15 set</td><td>SUPERMERCADO   XYZ</td><td>R$ 1.234,56</td></tr>
                      <tr><td></td><td>FARMACIA ABC</td><td>R$ 45,90</td></tr>
                      <tr><td>20 set.</td><td>PAGAMENTO RECEBIDO - BOLETO</td><td>R$ 500,00</td></tr>
                      <tr><td>21 set</td><td>LOJA CENTRO</td><td class="value--positive">R$ 30,00</td></tr>
                      <tr><td>22 set</td><td>CASHBACK</td><td><span style="color: rgb(0, 128, 0)">R$ 5,00</span></td></tr>
                      <tr><td>23 set</td><td>AJUSTE</td><td>- R$ 2,00</td></tr>
                      <tr><td>24 set</td><td>TARIFA ISENTA</td><td>R$ 0,00</td></tr>
                      <tr><td colspan="3">Total R$ 742,46</td></tr>
                    </table>
                  </div>
                </template>
              </mf-fatura-transactions-details>
            </div>
          </template>
        </mf-cartoesconsultafaturapfmf>
      </div>
    </mft-wc-wrapper>
  </mf-shell-bkl-cartoes-pf>
</div>
</body>
</html>
"""

PLAIN_TABLE_PAGE = """<html>
<body>
<h2 class="header-invoice__tittle">Fatura</h2>
<div class="wrapper">
  <table id="other"><tr><td>nothing</td></tr></table>
  <div class="invoice-details__table-container">
    <table>
      <thead><tr><th>Data</th><th>Descrição</th><th>Valor</th></tr></thead>
      <tbody>
        <tr><td>01/08/2026</td><td>POSTO &amp; CIA</td><td>R$ 200,00</td></tr>
        <tr><td>10/09/26</td><td>ESTORNO COMPRA</td><td>R$ 15,00</td></tr>
      </tbody>
    </table>
  </div>
</div>
</body>
</html>
"""

NO_STATEMENT_PAGE = """<html>
<body>
<div class="login">
  <table><tr><td>a</td><td>b</td></tr></table>
</div>
</body>
</html>
"""


@pytest.fixture
def statement_document():
    """Parsed statement page with nested shadow roots."""
    return html.document_fromstring(STATEMENT_PAGE)


@pytest.fixture
def plain_document():
    """Parsed statement page without shadow roots."""
    return html.document_fromstring(PLAIN_TABLE_PAGE)


@pytest.fixture
def empty_document():
    """Parsed page that is not a statement page."""
    return html.document_fromstring(NO_STATEMENT_PAGE)


@pytest.fixture
def statement_page():
    """Markup of the statement page with nested shadow roots."""
    return STATEMENT_PAGE


@pytest.fixture
def plain_page():
    """Markup of a statement page without shadow roots."""
    return PLAIN_TABLE_PAGE


@pytest.fixture
def no_statement_page():
    """Markup of a page that is not a statement page."""
    return NO_STATEMENT_PAGE
