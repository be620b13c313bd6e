from forecast.adjustment.forecaster import ForecastReport, forecast
from forecast.config import COIN_NAME


def format_amount(value) -> str:
    """
    Thousands-separated amount; whole values print without decimals.
    """
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{float(value):,.2f}"


def report_sections(report: ForecastReport):
    """
    Report as [(title, [(depth, line), ...]), ...] for the page and the console.
    """
    period = report.adjustment_period
    prediction = report.prediction

    if period.percent_of_target is None:
        share_of_target = "no target left"
    else:
        share_of_target = f"{period.percent_of_target:.1f}% of Target"

    if prediction.target_difference >= 0:
        difference = f"Under target by {format_amount(prediction.target_difference)} {COIN_NAME}"
    else:
        difference = f"Over target by {format_amount(-prediction.target_difference)} {COIN_NAME}"

    stats = [
        (0, f"Adjustment period: {period.period_index}"),
        (0, f"Target {COIN_NAME} issuance: {format_amount(period.target_fct)} (after {period.halving_period} halvings)"),
        (0, f"Period start block: {format_amount(period.start_block)}"),
        (0, f"Period end block: {format_amount(period.end_block)}"),
        (0, f"Current block height: {format_amount(period.block_height)}"),
        (1, f"Blocks elapsed in period: {format_amount(period.blocks_elapsed)} ({period.percent_complete:.1f}%)"),
        (1, f"Blocks remaining in period: {format_amount(period.blocks_remaining)} ({100 - period.percent_complete:.1f}%)"),
        (0, f"Issuance rate: {format_amount(period.current_mint_rate_gwei)} (gwei)"),
        (0, f"Total {COIN_NAME} issued: {format_amount(period.minted_so_far)} ({share_of_target})"),
    ]
    outlook = [
        (0, f"Forecasted issuance in current period: {format_amount(prediction.forecasted_issuance)} {COIN_NAME}"),
        (1, difference),
        (0, f"Forecasted change in mint rate: {prediction.percent_change_in_rate:.1f}%"),
        (0, f"Forecasted new mint rate: {format_amount(prediction.new_mint_rate_gwei)} (gwei)"),
    ]
    return [("Adjustment Period Stats:", stats), ("Prediction:", outlook)]


def format_report(report: ForecastReport) -> str:
    lines = []
    for title, items in report_sections(report):
        lines.append(title)
        for depth, text in items:
            lines.append(f"{'    ' * (depth + 1)}- {text}")
    return "\n".join(lines)


if __name__ == '__main__':
    from forecast.chain.reader import FacetChainReader, read_snapshot

    print(format_report(forecast(read_snapshot(FacetChainReader()))))
