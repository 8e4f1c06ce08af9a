# utils.py

def explain_metrics(metrics: dict) -> dict:
    """
    Generate human-readable explanations for each function's CFG metrics.

    Args:
        metrics (dict): Dictionary of metrics per function:
            {
              "main": {"blocks": 6, "edges": 7, "cleanup_edges": 2, "cyclomatic_complexity": 3, ...},
              ...
            }

    Returns:
        dict: {function_name: explanation_string}
    """
    explanations = {}

    for func, data in metrics.items():
        blocks = data.get("blocks", 0)
        edges = data.get("edges", 0)
        cc = data.get("cyclomatic_complexity", 1)
        cleanup = data.get("cleanup_edges", 0)
        unreachable = data.get("unreachable_blocks", 0)

        if cc <= 5:
            cc_text = "few branches"
        elif cc <= 10:
            cc_text = "moderate branching"
        else:
            cc_text = "heavy branching"

        explanation = (
            f"Function `{func}` lowers to **{blocks}** basic block{'s' if blocks != 1 else ''} "
            f"joined by **{edges}** edge{'s' if edges != 1 else ''}; "
            f"cyclomatic complexity **{cc}** ({cc_text})."
        )

        if cleanup:
            explanation += f" {cleanup} edge{'s' if cleanup != 1 else ''} lead{'s' if cleanup == 1 else ''} to cleanup/unwind code."
        if unreachable:
            explanation += f" ⚠️ {unreachable} block{'s are' if unreachable != 1 else ' is'} unreachable from bb0."

        explanations[func] = explanation

    return explanations
