import logging

import pandas as pd

from cohort_exposure_panel import load_yaml, make_panel_dataset


def main():

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    filepaths = load_yaml("./conf/filepaths.yaml")
    config = load_yaml(filepaths['pipeline_config'])

    cohort = pd.read_parquet(filepaths['cohort_path'])
    baseline = pd.read_parquet(filepaths['baseline_path'])
    exposure = pd.read_parquet(filepaths['exposure_path'])
    outcome = pd.read_parquet(filepaths['outcome_path'])

    panel, exposure_agegr = make_panel_dataset(
        cohort,
        outcome,
        baseline,
        exposure,
        config
    )

    panel.to_parquet(filepaths['panel_path'])
    exposure_agegr.to_parquet(filepaths['exposure_out_path'])


if __name__ == "__main__":
    main()
