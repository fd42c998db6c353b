from __future__ import annotations
from flask import Flask, request, jsonify, Response
from launchpilot.calculator.revenue import calculate_revenue_projections, parse_revenue_inputs
from launchpilot.config.env import configure_logging, get_server_config
from launchpilot.exports.reports import projection_report_md
from launchpilot.exports.writers import write_monthly_csv, write_summary_csv
from launchpilot.projections.defaults import PRODUCT_DEFAULTS
from launchpilot.projections.errors import ValidationError
from launchpilot.projections.inputs import parse_inputs
from launchpilot.projections.insights import build_projection

import json
import logging
import time
from collections import deque
from pathlib import Path

logger = logging.getLogger(__name__)

app = Flask(__name__)

OPENAPI_PATH = Path(__file__).with_name("openapi.json")
EXPORT_FORMATS = ("json", "csv", "summary-csv", "md")

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return get_server_config().api_key


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None or w is None:
        cfg = get_server_config()
        n = cfg.rate_limit_n if n is None else n
        w = cfg.rate_limit_window_sec if w is None else w
    return int(n), float(w)

def _trust_proxy() -> bool:
    if 'TRUST_PROXY' in app.config:
        return bool(app.config.get('TRUST_PROXY'))
    return get_server_config().trust_proxy

# client ip -> request timestamps inside the current window
_recent: dict[str, deque[float]] = {}


def _client_ip() -> str:
    xff = request.headers.get('X-Forwarded-For') if _trust_proxy() else None
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _fail(error: str, status: int, details=None):
    body = {'success': False, 'error': error}
    if details is not None:
        body['details'] = details
    return jsonify(body), status


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return _fail('unauthorized', 401)
    return None


def _check_rate_limit(ip: str):
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    # Forget clients with no requests inside the window
    for key in [k for k, q in _recent.items() if not q or now - q[-1] > window]:
        del _recent[key]
    dq = _recent.setdefault(ip, deque())
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp, status = _fail('rate_limited', 429)
        resp.status_code = status
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None


@app.before_request
def _auth_and_rate_limit():
    if request.path.startswith('/api/'):
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        if request.method == 'POST':
            rl = _check_rate_limit(_client_ip())
            if rl is not None:
                return rl
    return None


@app.errorhandler(ValidationError)
def _on_validation_error(e: ValidationError):
    logger.warning("validation failed on %s: %s", request.path, e.details)
    return _fail(e.message, 400, e.details)


@app.errorhandler(Exception)
def _on_unexpected_error(e: Exception):
    # Flask routing errors (404/405) keep their own status codes
    code = getattr(e, 'code', None)
    if isinstance(code, int) and code < 500:
        return _fail(getattr(e, 'name', 'error'), code)
    logger.exception("unhandled error on %s", request.path)
    return _fail(str(e) or 'Internal server error', 500)


def _projection_from_request() -> tuple[dict, dict]:
    payload = request.get_json(force=True, silent=True)
    inputs = parse_inputs(payload)
    logger.info("Calculating financial projections for %s over %d months",
                inputs.product_type, inputs.timeframe)
    return inputs.to_dict(), build_projection(inputs)


@app.post('/api/financial')
def post_financial():
    _, projection = _projection_from_request()
    return jsonify(projection)


@app.get('/api/financial')
def describe_financial():
    return jsonify({
        'name': 'Enhanced Financial Calculator API',
        'description': 'Advanced financial modeling and projections with scenario analysis',
        'methods': ['POST'],
        'endpoint': '/api/financial',
        'parameters': {
            'productType': 'enum - saas | course | consulting | physical | digital',
            'pricePoint': 'number - Price per unit/customer in USD',
            'subscriptionType': 'enum - monthly | annual | one-time',
            'targetCustomers': 'number - Target number of customers',
            'conversionRate': 'number - Expected conversion rate percentage (0.1-100)',
            'churnRate': 'number - Monthly churn rate percentage (0-100)',
            'acquisitionCost': 'number - Customer acquisition cost in USD',
            'lifetimeValueMultiplier': 'number - LTV multiplier (1+)',
            'upsellRate': 'number - Upsell rate percentage (0-100)',
            'upsellAmount': 'number - Average upsell amount in USD',
            'fixedCosts': 'number - Monthly fixed costs in USD',
            'variableCostPercentage': 'number - Variable cost percentage (0-100)',
            'marketingBudget': 'number - Monthly marketing budget in USD',
            'timeframe': 'integer - Projection timeframe in months (1-36)',
            'monthlyGrowthRate': 'number - Monthly growth rate percentage (0-100)',
            'seasonalityFactor': 'number - Seasonality multiplier (0.5-2)',
        },
        'features': [
            'Multi-scenario financial modeling (Conservative, Realistic, Optimistic)',
            'Break-even analysis with detailed timelines',
            'Customer lifetime value calculations',
            'ROI and profitability metrics',
            'Monthly cash flow projections',
            'Growth rate and churn modeling',
            'Seasonality adjustments',
            'Advanced financial insights',
        ],
    })


@app.get('/api/financial/defaults/<product_type>')
def get_defaults(product_type: str):
    d = PRODUCT_DEFAULTS.get(product_type)
    if d is None:
        return _fail('unknown_product_type', 404)
    return jsonify({'success': True, 'productType': product_type, 'defaults': d.to_dict()})


@app.post('/api/financial/export')
def export_financial():
    fmt = (request.args.get('format') or 'json').lower()
    if fmt not in EXPORT_FORMATS:
        return _fail('unsupported format', 400,
                     [{'field': 'format', 'message': 'Expected one of: ' + ', '.join(EXPORT_FORMATS)}])
    inputs, projection = _projection_from_request()
    filename = f'financial-projections.{fmt}'
    if fmt == 'csv':
        body, mimetype = write_monthly_csv(projection['scenarios']), 'text/csv'
    elif fmt == 'summary-csv':
        body, mimetype = write_summary_csv(projection['scenarios']), 'text/csv'
        filename = 'financial-projections-summary.csv'
    elif fmt == 'md':
        body, mimetype = projection_report_md(inputs, projection), 'text/markdown'
    else:
        body = json.dumps({
            'inputs': inputs,
            'scenarios': projection['scenarios'],
            'insights': projection['insights'],
            'generatedAt': projection['generatedAt'],
        }, indent=2)
        mimetype = 'application/json'
    return Response(body, mimetype=mimetype, headers={
        'Content-Disposition': f'attachment; filename="{filename}"'
    })


@app.post('/api/revenue-calculator')
def post_revenue_calculator():
    payload = request.get_json(force=True, silent=True)
    inp = parse_revenue_inputs(payload)
    return jsonify({'success': True, **calculate_revenue_projections(inp)})


@app.get('/openapi.json')
def get_openapi():
    try:
        spec = json.loads(OPENAPI_PATH.read_text())
    except FileNotFoundError:
        return _fail('openapi_not_found', 404)
    return jsonify(spec)


def main():
    configure_logging()
    cfg = get_server_config()
    app.run(host=cfg.host, port=cfg.port)


if __name__ == '__main__':
    main()
