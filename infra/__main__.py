import pulumi

from vmstack.iac import configs_from_pulumi, define_stack


def main():
    try:
        configs = configs_from_pulumi()
    except ValueError as e:
        pulumi.log.error(f"Invalid stack configuration: {e}")
        raise

    resources = define_stack(configs)
    for name, output in resources.outputs.items():
        pulumi.export(name, output)


main()
