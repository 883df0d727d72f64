"""
Cost estimation for article generation.
"""


def estimate_costs(
    prompt_tokens: int,
    chunk_count: int,
    *,
    max_response_tokens: int,
    prompt_overhead_tokens: int = 0,
    rates: dict[str, float],
) -> dict[str, float]:
    """Estimate GPT costs for generating an article; output is an upper bound."""
    tin = prompt_tokens + chunk_count * prompt_overhead_tokens
    tout = chunk_count * max_response_tokens
    input_cost = (tin / 1_000_000.0) * float(rates.get("gpt_in_per_mtok", 2.50))
    output_cost = (tout / 1_000_000.0) * float(rates.get("gpt_out_per_mtok", 10.00))
    return {
        "input_tokens": tin,
        "output_tokens": tout,
        "input_cost": input_cost,
        "output_cost": output_cost,
        "total": input_cost + output_cost,
    }
