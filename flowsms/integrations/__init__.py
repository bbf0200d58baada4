"""flowsms.integrations — External service gateway modules.

All outbound HTTP calls to third-party APIs go through a gateway in this
package, never via bare `requests` calls in services or blueprints.
Every gateway takes an optional `requests.Session` so tests can inject a
fake one.

Current gateways:
  sheets_gateway.SheetsGateway     — Google Sheets CSV exports
  airtable_gateway.AirtableGateway — Airtable REST (Flow Standards SKU library)
  monday_gateway.MondayGateway     — Monday.com GraphQL API
"""
